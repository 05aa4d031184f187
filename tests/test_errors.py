from table_rows.core.errors import ConfigurationError, TableError, TableLoadError


def test_location_joins_file_and_path():
    e = TableLoadError(code="E_INVALID_FIELD", message="bad", file="t.yaml", path="options.x")
    assert e.location == "t.yaml:options.x"
    assert str(e) == "t.yaml:options.x: E_INVALID_FIELD: bad"


def test_location_defaults_when_unlocated():
    e = ConfigurationError(code="E_UNKNOWN_COLUMN", message="unknown column: z")
    assert e.location == "<table>"
    assert str(e) == "<table>: E_UNKNOWN_COLUMN: unknown column: z"
    assert isinstance(e, TableError)
    assert ConfigurationError(code="E", message="m", path="columns").location == "columns"
