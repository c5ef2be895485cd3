import pytest

from globscan.errors import ConfigurationError
from globscan.fs_scan import display_name, read_unit_list, scan_units


def test_scan_units_filters_and_sorts(tmp_path):
	(tmp_path / "pkg").mkdir()
	(tmp_path / "pkg" / "b.py").write_text("")
	(tmp_path / "a.py").write_text("")
	(tmp_path / "notes.txt").write_text("")
	(tmp_path / "__pycache__").mkdir()
	(tmp_path / "__pycache__" / "c.py").write_text("")

	units = scan_units(str(tmp_path))

	assert units == sorted([str(tmp_path / "a.py"), str(tmp_path / "pkg" / "b.py")])


def test_scan_units_other_extensions(tmp_path):
	(tmp_path / "main.CPP").write_text("")
	(tmp_path / "a.py").write_text("")
	assert scan_units(str(tmp_path), [".cpp"]) == [str(tmp_path / "main.CPP")]


def test_scan_units_rejects_missing_root(tmp_path):
	with pytest.raises(ConfigurationError):
		scan_units(str(tmp_path / "missing"))


def test_read_unit_list(tmp_path):
	listing = tmp_path / "units.txt"
	listing.write_text("# sources\nsrc/a.py\n\n  src/b.py  \n")
	assert read_unit_list(str(listing)) == ["src/a.py", "src/b.py"]


def test_read_unit_list_missing_file(tmp_path):
	with pytest.raises(ConfigurationError):
		read_unit_list(str(tmp_path / "none.txt"))


def test_display_name():
	assert display_name("/abs/path/to/unit.cpp") == "unit.cpp"
	assert display_name("unit.cpp") == "unit.cpp"
