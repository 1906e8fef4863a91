"""
Program database (MSF 7.00) reader.

Enumerates the procedures of every module of a PDB together with the source
file and line they start at. Only the streams needed for that are read: the
stream directory, the PDB info stream (for the ``/names`` string table), the
DBI module list, and each module's symbol and C13 line records.
"""

from __future__ import annotations

import fnmatch
from dataclasses import dataclass, field
from io import BytesIO
from typing import BinaryIO, Dict, List, Optional

from dissect.cstruct import cstruct

from .errors import PdbFormatError
from .models import SourceFileLocation
from .protocols import Logger

pdb_def = """
struct PDB7_HEADER {
    char    signature[32];
    uint32  page_size;
    uint32  free_page_map;
    uint32  num_pages;
    uint32  directory_size;
    uint32  reserved;
    uint32  block_map_page;
};

struct PDB_INFO_HEADER {
    uint32  version;
    uint32  signature;
    uint32  age;
    char    guid[16];
};

struct DBI_HEADER {
    int32   version_signature;
    uint32  version_header;
    uint32  age;
    uint16  global_stream;
    uint16  build_number;
    uint16  public_stream;
    uint16  pdb_dll_version;
    uint16  sym_record_stream;
    uint16  pdb_dll_rbld;
    int32   mod_info_size;
    int32   section_contribution_size;
    int32   section_map_size;
    int32   source_info_size;
    int32   type_server_map_size;
    uint32  mfc_type_server_index;
    int32   optional_dbg_header_size;
    int32   ec_substream_size;
    uint16  flags;
    uint16  machine;
    uint32  padding;
};

struct DBI_SECTION_CONTRIB {
    int16   section;
    int16   pad1;
    int32   offset;
    int32   size;
    uint32  characteristics;
    int16   module;
    int16   pad2;
    uint32  data_crc;
    uint32  reloc_crc;
};

struct DBI_MODULE_INFO {
    uint32  opened;
    DBI_SECTION_CONTRIB section;
    uint16  flags;
    uint16  stream;
    uint32  symbol_bytes;
    uint32  c11_line_bytes;
    uint32  c13_line_bytes;
    uint16  num_files;
    uint16  padding;
    uint32  file_name_offsets;
    uint32  source_file_name;
    uint32  pdb_file_path_name;
    char    module_name[];
    char    object_name[];
};

struct SYMBOL_RECORD_HEADER {
    uint16  length;         // excludes this field
    uint16  kind;
};

struct PROC_SYM32 {
    uint32  parent;
    uint32  end;
    uint32  next;
    uint32  length;
    uint32  debug_start;
    uint32  debug_end;
    uint32  type_index;
    uint32  offset;
    uint16  section;
    uint8   flags;
    char    name[];
};

struct DEBUG_SUBSECTION_HEADER {
    uint32  kind;
    uint32  length;
};

struct CV_LINE_HEADER {
    uint32  offset;
    uint16  section;
    uint16  flags;
    uint32  code_size;
};

struct CV_LINE_BLOCK {
    uint32  file_id;        // offset into the file checksums subsection
    uint32  num_lines;
    uint32  block_size;
};

struct CV_LINE {
    uint32  offset;
    uint32  flags;          // line_start:24, delta_line_end:7, is_statement:1
};

struct CV_FILE_CHECKSUM {
    uint32  file_name_offset;
    uint8   checksum_size;
    uint8   checksum_kind;
};

struct STRING_TABLE_HEADER {
    uint32  signature;
    uint32  hash_version;
    uint32  byte_size;
};
"""

c_pdb = cstruct()
c_pdb.load(pdb_def)

PDB7_SIGNATURE = b"Microsoft C/C++ MSF 7.00\r\n\x1aDS\x00\x00\x00"
NIL_STREAM_SIZE = 0xFFFFFFFF
NO_STREAM = 0xFFFF

PDB_INFO_STREAM = 1
DBI_STREAM = 3

STRING_TABLE_SIGNATURE = 0xEFFEEFFE
NAMES_STREAM_NAME = "/names"

CV_SIGNATURE_C13 = 4

S_LPROC32 = 0x110F
S_GPROC32 = 0x1110
S_LPROC32_ID = 0x1146
S_GPROC32_ID = 0x1147
PROCEDURE_KINDS = frozenset({S_LPROC32, S_GPROC32, S_LPROC32_ID, S_GPROC32_ID})

DEBUG_S_IGNORE = 0x80000000
DEBUG_S_LINES = 0xF2
DEBUG_S_FILECHKSMS = 0xF4

CV_LINE_NUMBER_MASK = 0x00FFFFFF


def _align4(value: int) -> int:
    return (value + 3) & ~3


def _cstring(buffer: bytes, offset: int) -> str:
    end = buffer.find(b"\x00", offset)
    if end < 0:
        end = len(buffer)
    return buffer[offset:end].decode("utf-8", errors="replace")


def _read_uint32_array(stream: BinaryIO, count: int) -> List[int]:
    if count <= 0:
        return []
    return list(c_pdb.uint32[count](stream))


class MsfFile:
    """Multi-stream file container underlying a PDB."""

    def __init__(self, fh: BinaryIO):
        self.fh = fh
        header = c_pdb.PDB7_HEADER(fh)
        if header.signature != PDB7_SIGNATURE:
            raise PdbFormatError("Not an MSF 7.00 program database")
        if not header.page_size:
            raise PdbFormatError("Invalid page size")
        self.page_size = header.page_size

        directory_pages = -(-header.directory_size // self.page_size)
        fh.seek(header.block_map_page * self.page_size)
        block_map = _read_uint32_array(fh, directory_pages)
        directory = BytesIO(self._read_pages(block_map, header.directory_size))

        num_streams = c_pdb.uint32.read(directory)
        sizes = _read_uint32_array(directory, num_streams)
        self._streams = []
        for size in sizes:
            if size == NIL_STREAM_SIZE:
                size = 0
            pages = _read_uint32_array(directory, -(-size // self.page_size))
            self._streams.append((size, pages))

    def __len__(self) -> int:
        return len(self._streams)

    def _read_pages(self, pages: List[int], size: int) -> bytes:
        chunks = []
        for page in pages:
            self.fh.seek(page * self.page_size)
            chunks.append(self.fh.read(self.page_size))
        data = b"".join(chunks)[:size]
        if len(data) < size:
            raise PdbFormatError("Stream extends beyond end of file")
        return data

    def stream(self, index: int) -> bytes:
        if not 0 <= index < len(self._streams):
            raise PdbFormatError(f"Stream {index} does not exist")
        size, pages = self._streams[index]
        return self._read_pages(pages, size)


@dataclass
class Procedure:
    name: str
    section: int
    offset: int
    length: int


@dataclass
class LineEntry:
    section: int
    address: int
    line: int
    file_id: int


@dataclass
class Module:
    name: str
    procedures: List[Procedure] = field(default_factory=list)
    lines: List[LineEntry] = field(default_factory=list)
    checksums: Dict[int, int] = field(default_factory=dict)

    def line_for(self, procedure: Procedure) -> Optional[LineEntry]:
        """Lowest-address line entry inside the procedure's code range."""
        end = procedure.offset + max(procedure.length, 1)
        candidates = [
            entry
            for entry in self.lines
            if entry.section == procedure.section
            and procedure.offset <= entry.address < end
        ]
        if not candidates:
            return None
        return min(candidates, key=lambda entry: entry.address)


def parse_procedures(data: bytes, symbol_bytes: int) -> List[Procedure]:
    """Procedure records of a module symbol stream."""
    stream = BytesIO(data[:symbol_bytes])
    if symbol_bytes < 4 or c_pdb.uint32.read(stream) != CV_SIGNATURE_C13:
        return []

    procedures: List[Procedure] = []
    while stream.tell() + len(c_pdb.SYMBOL_RECORD_HEADER) <= symbol_bytes:
        start = stream.tell()
        record = c_pdb.SYMBOL_RECORD_HEADER(stream)
        if record.length < 2:
            break
        if record.kind in PROCEDURE_KINDS:
            proc = c_pdb.PROC_SYM32(stream)
            procedures.append(
                Procedure(
                    name=proc.name.decode("utf-8", errors="replace"),
                    section=proc.section,
                    offset=proc.offset,
                    length=proc.length,
                )
            )
        stream.seek(start + 2 + record.length)
    return procedures


def parse_file_checksums(body: bytes) -> Dict[int, int]:
    """Map checksum entry offset (the line blocks' file id) to name offset."""
    stream = BytesIO(body)
    result: Dict[int, int] = {}
    while stream.tell() + len(c_pdb.CV_FILE_CHECKSUM) <= len(body):
        entry_offset = stream.tell()
        entry = c_pdb.CV_FILE_CHECKSUM(stream)
        result[entry_offset] = entry.file_name_offset
        stream.seek(_align4(stream.tell() + entry.checksum_size))
    return result


def parse_line_subsection(body: bytes) -> List[LineEntry]:
    stream = BytesIO(body)
    header = c_pdb.CV_LINE_HEADER(stream)
    entries: List[LineEntry] = []
    block_header_size = len(c_pdb.CV_LINE_BLOCK)
    while stream.tell() + block_header_size <= len(body):
        block_start = stream.tell()
        block = c_pdb.CV_LINE_BLOCK(stream)
        if block.block_size < block_header_size:
            break
        for _ in range(block.num_lines):
            line = c_pdb.CV_LINE(stream)
            entries.append(
                LineEntry(
                    section=header.section,
                    address=header.offset + line.offset,
                    line=line.flags & CV_LINE_NUMBER_MASK,
                    file_id=block.file_id,
                )
            )
        stream.seek(block_start + block.block_size)
    return entries


def parse_c13_lines(module: Module, data: bytes) -> None:
    stream = BytesIO(data)
    subsection_header_size = len(c_pdb.DEBUG_SUBSECTION_HEADER)
    while stream.tell() + subsection_header_size <= len(data):
        subsection = c_pdb.DEBUG_SUBSECTION_HEADER(stream)
        body_start = stream.tell()
        body = stream.read(subsection.length)
        if not subsection.kind & DEBUG_S_IGNORE:
            if subsection.kind == DEBUG_S_FILECHKSMS:
                module.checksums.update(parse_file_checksums(body))
            elif subsection.kind == DEBUG_S_LINES:
                module.lines.extend(parse_line_subsection(body))
        stream.seek(body_start + _align4(subsection.length))


class PdbReader:
    """Function symbols of one binary's PDB; open with ``with``."""

    def __init__(self, binary: str, pdb: str, logger: Logger):
        self.binary = binary
        self.pdb = pdb
        self.logger = logger
        self._fh: Optional[BinaryIO] = None
        self._msf: Optional[MsfFile] = None
        self._modules: Optional[List[Module]] = None
        self._names: Optional[bytes] = None

    def open(self) -> "PdbReader":
        self._fh = open(self.pdb, "rb")
        try:
            self._msf = MsfFile(self._fh)
        except Exception:
            self.close()
            raise
        return self

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
        self._fh = None
        self._msf = None

    def __enter__(self) -> "PdbReader":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def msf(self) -> MsfFile:
        if self._msf is None:
            raise PdbFormatError(f"PDB '{self.pdb}' is not open")
        return self._msf

    def get_functions(self, pattern: str) -> List[SourceFileLocation]:
        """Procedures whose name matches the shell-style ``pattern``."""
        result: List[SourceFileLocation] = []
        for module in self.modules():
            for procedure in module.procedures:
                if fnmatch.fnmatchcase(procedure.name, pattern):
                    result.append(self._to_location(module, procedure))
        return result

    def modules(self) -> List[Module]:
        if self._modules is None:
            self._modules = self._load_modules()
        return self._modules

    def _load_modules(self) -> List[Module]:
        dbi = BytesIO(self.msf.stream(DBI_STREAM))
        header = c_pdb.DBI_HEADER(dbi)
        if header.version_signature != -1:
            raise PdbFormatError("Unsupported DBI stream version")

        end = dbi.tell() + header.mod_info_size
        modules: List[Module] = []
        while dbi.tell() < end:
            info = c_pdb.DBI_MODULE_INFO(dbi)
            dbi.seek(_align4(dbi.tell()))
            module = Module(name=info.module_name.decode("utf-8", errors="replace"))
            if info.stream != NO_STREAM:
                data = self.msf.stream(info.stream)
                module.procedures = parse_procedures(data, info.symbol_bytes)
                c13_start = info.symbol_bytes + info.c11_line_bytes
                parse_c13_lines(module, data[c13_start : c13_start + info.c13_line_bytes])
            modules.append(module)
        return modules

    def named_streams(self) -> Dict[str, int]:
        info = BytesIO(self.msf.stream(PDB_INFO_STREAM))
        c_pdb.PDB_INFO_HEADER(info)
        buffer_size = c_pdb.uint32.read(info)
        buffer = info.read(buffer_size)

        c_pdb.uint32.read(info)  # number of entries
        capacity = c_pdb.uint32.read(info)
        present = _read_uint32_array(info, c_pdb.uint32.read(info))
        _read_uint32_array(info, c_pdb.uint32.read(info))  # deleted buckets

        streams: Dict[str, int] = {}
        for bucket in range(capacity):
            word = bucket // 32
            if word >= len(present) or not (present[word] >> (bucket % 32)) & 1:
                continue
            key = c_pdb.uint32.read(info)
            value = c_pdb.uint32.read(info)
            streams[_cstring(buffer, key)] = value
        return streams

    def string_table(self) -> bytes:
        if self._names is None:
            self._names = b""
            index = self.named_streams().get(NAMES_STREAM_NAME)
            if index is not None:
                stream = BytesIO(self.msf.stream(index))
                header = c_pdb.STRING_TABLE_HEADER(stream)
                if header.signature == STRING_TABLE_SIGNATURE:
                    self._names = stream.read(header.byte_size)
        return self._names

    def _file_name(self, module: Module, file_id: int) -> str:
        name_offset = module.checksums.get(file_id)
        if name_offset is None:
            return ""
        return _cstring(self.string_table(), name_offset)

    def _to_location(self, module: Module, procedure: Procedure) -> SourceFileLocation:
        entry = module.line_for(procedure)
        if entry is None:
            self.logger.debug_warning(
                f"Could not find source location of symbol '{procedure.name}' "
                f"in '{self.pdb}'"
            )
            return SourceFileLocation(symbol=procedure.name)
        return SourceFileLocation(
            symbol=procedure.name,
            source_file=self._file_name(module, entry.file_id),
            line=entry.line,
        )


class PdbReaderFactory:
    """Creates unopened PdbReaders; the caller enters them as context managers."""

    def create(self, binary: str, pdb: str, logger: Logger) -> PdbReader:
        return PdbReader(binary, pdb, logger)
