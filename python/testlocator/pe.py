"""Minimal PE image reader: import table and CodeView PDB reference."""

from __future__ import annotations

from typing import BinaryIO, List, Optional

from dissect.cstruct import cstruct

from .errors import PeFormatError
from .protocols import Logger

pe_def = """
struct IMAGE_DOS_HEADER {
    uint16  e_magic;
    uint16  e_res[29];
    uint32  e_lfanew;
};

struct IMAGE_FILE_HEADER {
    uint16  Machine;
    uint16  NumberOfSections;
    uint32  TimeDateStamp;
    uint32  PointerToSymbolTable;
    uint32  NumberOfSymbols;
    uint16  SizeOfOptionalHeader;
    uint16  Characteristics;
};

struct IMAGE_DATA_DIRECTORY {
    uint32  VirtualAddress;
    uint32  Size;
};

struct IMAGE_OPTIONAL_HEADER32 {
    uint16  Magic;
    uint8   MajorLinkerVersion;
    uint8   MinorLinkerVersion;
    uint32  SizeOfCode;
    uint32  SizeOfInitializedData;
    uint32  SizeOfUninitializedData;
    uint32  AddressOfEntryPoint;
    uint32  BaseOfCode;
    uint32  BaseOfData;
    uint32  ImageBase;
    uint32  SectionAlignment;
    uint32  FileAlignment;
    uint16  MajorOperatingSystemVersion;
    uint16  MinorOperatingSystemVersion;
    uint16  MajorImageVersion;
    uint16  MinorImageVersion;
    uint16  MajorSubsystemVersion;
    uint16  MinorSubsystemVersion;
    uint32  Win32VersionValue;
    uint32  SizeOfImage;
    uint32  SizeOfHeaders;
    uint32  CheckSum;
    uint16  Subsystem;
    uint16  DllCharacteristics;
    uint32  SizeOfStackReserve;
    uint32  SizeOfStackCommit;
    uint32  SizeOfHeapReserve;
    uint32  SizeOfHeapCommit;
    uint32  LoaderFlags;
    uint32  NumberOfRvaAndSizes;
};

struct IMAGE_OPTIONAL_HEADER64 {
    uint16  Magic;
    uint8   MajorLinkerVersion;
    uint8   MinorLinkerVersion;
    uint32  SizeOfCode;
    uint32  SizeOfInitializedData;
    uint32  SizeOfUninitializedData;
    uint32  AddressOfEntryPoint;
    uint32  BaseOfCode;
    uint64  ImageBase;
    uint32  SectionAlignment;
    uint32  FileAlignment;
    uint16  MajorOperatingSystemVersion;
    uint16  MinorOperatingSystemVersion;
    uint16  MajorImageVersion;
    uint16  MinorImageVersion;
    uint16  MajorSubsystemVersion;
    uint16  MinorSubsystemVersion;
    uint32  Win32VersionValue;
    uint32  SizeOfImage;
    uint32  SizeOfHeaders;
    uint32  CheckSum;
    uint16  Subsystem;
    uint16  DllCharacteristics;
    uint64  SizeOfStackReserve;
    uint64  SizeOfStackCommit;
    uint64  SizeOfHeapReserve;
    uint64  SizeOfHeapCommit;
    uint32  LoaderFlags;
    uint32  NumberOfRvaAndSizes;
};

struct IMAGE_SECTION_HEADER {
    char    Name[8];
    uint32  VirtualSize;
    uint32  VirtualAddress;
    uint32  SizeOfRawData;
    uint32  PointerToRawData;
    uint32  PointerToRelocations;
    uint32  PointerToLinenumbers;
    uint16  NumberOfRelocations;
    uint16  NumberOfLinenumbers;
    uint32  Characteristics;
};

struct IMAGE_IMPORT_DESCRIPTOR {
    uint32  OriginalFirstThunk;
    uint32  TimeDateStamp;
    uint32  ForwarderChain;
    uint32  Name;
    uint32  FirstThunk;
};

struct IMAGE_DEBUG_DIRECTORY {
    uint32  Characteristics;
    uint32  TimeDateStamp;
    uint16  MajorVersion;
    uint16  MinorVersion;
    uint32  Type;
    uint32  SizeOfData;
    uint32  AddressOfRawData;
    uint32  PointerToRawData;
};

struct CV_INFO_PDB70 {
    uint32  CvSignature;
    char    Signature[16];      // GUID
    uint32  Age;
    char    PdbFileName[];
};
"""

c_pe = cstruct()
c_pe.load(pe_def)

IMAGE_DOS_SIGNATURE = 0x5A4D  # MZ
IMAGE_NT_SIGNATURE = 0x00004550  # PE\0\0
IMAGE_NT_OPTIONAL_HDR32_MAGIC = 0x10B
IMAGE_NT_OPTIONAL_HDR64_MAGIC = 0x20B
IMAGE_NUMBEROF_DIRECTORY_ENTRIES = 16

IMAGE_DIRECTORY_ENTRY_IMPORT = 1
IMAGE_DIRECTORY_ENTRY_DEBUG = 6
IMAGE_DEBUG_TYPE_CODEVIEW = 2

CV_SIGNATURE_RSDS = 0x53445352  # RSDS


class PeImage:
    """Headers and section table of a PE file, read from an open handle."""

    def __init__(self, fh: BinaryIO):
        self.fh = fh

        dos = c_pe.IMAGE_DOS_HEADER(fh)
        if dos.e_magic != IMAGE_DOS_SIGNATURE:
            raise PeFormatError("Missing MZ signature")

        fh.seek(dos.e_lfanew)
        if c_pe.uint32.read(fh) != IMAGE_NT_SIGNATURE:
            raise PeFormatError("Missing PE signature")

        self.file_header = c_pe.IMAGE_FILE_HEADER(fh)
        optional_offset = fh.tell()
        magic = c_pe.uint16.read(fh)
        fh.seek(optional_offset)
        if magic == IMAGE_NT_OPTIONAL_HDR32_MAGIC:
            self.optional_header = c_pe.IMAGE_OPTIONAL_HEADER32(fh)
        elif magic == IMAGE_NT_OPTIONAL_HDR64_MAGIC:
            self.optional_header = c_pe.IMAGE_OPTIONAL_HEADER64(fh)
        else:
            raise PeFormatError(f"Unknown optional header magic 0x{magic:x}")

        count = min(
            self.optional_header.NumberOfRvaAndSizes, IMAGE_NUMBEROF_DIRECTORY_ENTRIES
        )
        self.data_directories = [c_pe.IMAGE_DATA_DIRECTORY(fh) for _ in range(count)]

        fh.seek(optional_offset + self.file_header.SizeOfOptionalHeader)
        self.sections = [
            c_pe.IMAGE_SECTION_HEADER(fh)
            for _ in range(self.file_header.NumberOfSections)
        ]

    @property
    def is_64bit(self) -> bool:
        return self.optional_header.Magic == IMAGE_NT_OPTIONAL_HDR64_MAGIC

    def data_directory(self, index: int):
        if index >= len(self.data_directories):
            return None
        directory = self.data_directories[index]
        if not directory.VirtualAddress or not directory.Size:
            return None
        return directory

    def rva_to_offset(self, rva: int) -> int:
        for section in self.sections:
            size = max(section.VirtualSize, section.SizeOfRawData)
            if section.VirtualAddress <= rva < section.VirtualAddress + size:
                return rva - section.VirtualAddress + section.PointerToRawData
        if rva < self.optional_header.SizeOfHeaders:
            return rva
        raise PeFormatError(f"RVA 0x{rva:x} is outside of all sections")

    def read_string(self, rva: int) -> str:
        self.fh.seek(self.rva_to_offset(rva))
        return c_pe.char[None](self.fh).decode("utf-8", errors="replace")

    def imports(self) -> List[str]:
        """Names of the imported modules, in import table order."""
        directory = self.data_directory(IMAGE_DIRECTORY_ENTRY_IMPORT)
        if directory is None:
            return []

        offset = self.rva_to_offset(directory.VirtualAddress)
        names: List[str] = []
        while True:
            self.fh.seek(offset)
            descriptor = c_pe.IMAGE_IMPORT_DESCRIPTOR(self.fh)
            if descriptor.Name == 0:
                break
            names.append(self.read_string(descriptor.Name))
            offset += len(c_pe.IMAGE_IMPORT_DESCRIPTOR)
        return names

    def pdb_path(self) -> Optional[str]:
        """PDB file name from the CodeView debug entry, if there is one."""
        directory = self.data_directory(IMAGE_DIRECTORY_ENTRY_DEBUG)
        if directory is None:
            return None

        count = directory.Size // len(c_pe.IMAGE_DEBUG_DIRECTORY)
        self.fh.seek(self.rva_to_offset(directory.VirtualAddress))
        entries = [c_pe.IMAGE_DEBUG_DIRECTORY(self.fh) for _ in range(count)]
        for entry in entries:
            if entry.Type != IMAGE_DEBUG_TYPE_CODEVIEW or not entry.PointerToRawData:
                continue
            self.fh.seek(entry.PointerToRawData)
            info = c_pe.CV_INFO_PDB70(self.fh)
            if info.CvSignature == CV_SIGNATURE_RSDS:
                return info.PdbFileName.decode("utf-8", errors="replace")
        return None


def parse_imports(binary: str, logger: Logger) -> List[str]:
    """Imported module file names of ``binary``; empty when unreadable."""
    try:
        with open(binary, "rb") as fh:
            return PeImage(fh).imports()
    except (OSError, EOFError, PeFormatError) as e:
        logger.warning(f"Could not parse imports of '{binary}': {e}")
        return []


def extract_pdb_path(binary: str, logger: Logger) -> Optional[str]:
    try:
        with open(binary, "rb") as fh:
            return PeImage(fh).pdb_path()
    except (OSError, EOFError, PeFormatError) as e:
        logger.debug_warning(f"Could not read PDB path from '{binary}': {e}")
        return None
