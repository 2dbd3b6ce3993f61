from nuget_outdated.models import CpmSettings, IgnoreEntry, PackageReference
from nuget_outdated.resolution import is_ignored, resolve_version


def _settings() -> CpmSettings:
    settings = CpmSettings()
    settings.set_global("Newtonsoft.Json", "11.0.0")
    settings.set_project("TestProject", "Newtonsoft.Json", "12.0.1")
    settings.set_project("OtherProject", "Newtonsoft.Json", "13.0.1")
    return settings


def test_direct_version_wins():
    ref = PackageReference("Newtonsoft.Json", "10.0.0", "TestProject")
    assert resolve_version(ref, _settings()) == "10.0.0"


def test_project_version_beats_global():
    settings = _settings()
    assert resolve_version(PackageReference("Newtonsoft.Json", None, "TestProject"), settings) == "12.0.1"
    assert resolve_version(PackageReference("newtonsoft.json", None, "otherproject"), settings) == "13.0.1"


def test_global_version_used_for_other_projects():
    ref = PackageReference("Newtonsoft.Json", None, "ThirdProject")
    assert resolve_version(ref, _settings()) == "11.0.0"


def test_unresolved_reference():
    ref = PackageReference("Serilog", None, "TestProject")
    assert resolve_version(ref, _settings()) is None
    assert resolve_version(ref, CpmSettings()) is None


def test_settings_built_from_plain_dicts_are_case_insensitive():
    settings = CpmSettings(
        global_versions={"Newtonsoft.Json": "11.0.0"},
        project_versions={"TestProject": {"Serilog": "2.10.0"}},
    )

    assert settings.global_version("NEWTONSOFT.JSON") == "11.0.0"
    assert settings.project_version("testproject", "serilog") == "2.10.0"
    assert resolve_version(PackageReference("serilog", None, "TESTPROJECT"), settings) == "2.10.0"


def test_empty_direct_version_falls_through():
    ref = PackageReference("Newtonsoft.Json", "", "ThirdProject")
    assert resolve_version(ref, _settings()) == "11.0.0"


def test_is_ignored_is_case_insensitive():
    ignore_list = [IgnoreEntry("ProjectA", "Serilog"), IgnoreEntry("ProjectA", "Serilog")]

    assert is_ignored("projecta", "SERILOG", ignore_list)
    assert not is_ignored("ProjectB", "Serilog", ignore_list)
    assert not is_ignored("ProjectA", "Newtonsoft.Json", ignore_list)
    assert not is_ignored("ProjectA", "Serilog", [])
