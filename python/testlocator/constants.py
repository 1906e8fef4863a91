"""Name markers emitted by GoogleTest and the trait macros."""

# Suffix of every generated test method body
TEST_BODY_SIGNATURE = "::TestBody"

# Trait methods are named <name>__GTA__<value>_GTA_TRAIT
TRAIT_SEPARATOR = "__GTA__"
TRAIT_APPENDIX = "_GTA_TRAIT"

SCOPE_SEPARATOR = "::"
ANONYMOUS_NAMESPACE = "`anonymous namespace'"

TEST_METHOD_PATTERN = "*" + TEST_BODY_SIGNATURE
TRAIT_PATTERN = "*" + TRAIT_APPENDIX
