"""Tests for Directory.Packages.props loading."""

from pathlib import Path

from conftest import write_props
from nuget_outdated.cpm import load_cpm_settings, parse_project_condition


def test_missing_props_file_gives_empty_table(tmp_path: Path, sink) -> None:
    settings = load_cpm_settings(tmp_path, sink)

    assert settings.is_empty
    assert sink.messages == []


def test_global_versions_last_wins(tmp_path: Path, sink) -> None:
    write_props(
        tmp_path,
        '    <PackageVersion Include="Newtonsoft.Json" Version="12.0.1" />\n'
        '    <PackageVersion Update="Serilog" Version="2.10.0" />\n'
        '    <PackageVersion Include="newtonsoft.json" Version="13.0.1" />\n'
        '    <PackageVersion Include="NoVersion" />',
    )

    settings = load_cpm_settings(tmp_path, sink)

    assert settings.global_version("Newtonsoft.Json") == "13.0.1"
    assert settings.global_version("SERILOG") == "2.10.0"
    assert settings.global_version("NoVersion") is None
    assert sink.messages == []


def test_include_wins_over_update(tmp_path: Path, sink) -> None:
    write_props(tmp_path, '    <PackageVersion Include="A" Update="B" Version="1.0.0" />')

    settings = load_cpm_settings(tmp_path, sink)

    assert settings.global_version("A") == "1.0.0"
    assert settings.global_version("B") is None


def test_project_scoped_versions(tmp_path: Path, sink) -> None:
    write_props(
        tmp_path,
        "    <PackageVersion Update=\"Newtonsoft.Json\" Version=\"12.0.1\" "
        "Condition=\"'$(MSBuildProjectName)' == 'TestProject'\" />\n"
        "    <PackageVersion Update=\"Newtonsoft.Json\" Version=\"13.0.1\" "
        "Condition=\"'$(MSBuildProjectName)'=='OtherProject'\" />",
    )

    settings = load_cpm_settings(tmp_path, sink)

    assert settings.project_version("testproject", "newtonsoft.json") == "12.0.1"
    assert settings.project_version("OtherProject", "Newtonsoft.Json") == "13.0.1"
    assert settings.global_version("Newtonsoft.Json") is None


def test_complex_condition_is_skipped_with_warning(tmp_path: Path, sink) -> None:
    write_props(
        tmp_path,
        "    <PackageVersion Include=\"Polly\" Version=\"8.0.0\" "
        "Condition=\"'$(TargetFramework)' == 'net8.0'\" />",
    )

    settings = load_cpm_settings(tmp_path, sink)

    assert settings.is_empty
    assert len(sink.messages) == 1
    assert "Skipping complex PackageVersion condition" in sink.messages[0]


def test_malformed_props_gives_empty_table(tmp_path: Path, sink) -> None:
    (tmp_path / "Directory.Packages.props").write_text("<Project><ItemGroup>", encoding="utf-8")

    settings = load_cpm_settings(tmp_path, sink)

    assert settings.is_empty
    assert len(sink.messages) == 1
    assert "Directory.Packages.props" in sink.messages[0]


def test_props_file_is_only_read_at_root(tmp_path: Path, sink) -> None:
    nested = tmp_path / "src"
    nested.mkdir()
    write_props(nested, '    <PackageVersion Include="A" Version="1.0.0" />')

    assert load_cpm_settings(tmp_path, sink).is_empty


def test_namespaced_props_file(tmp_path: Path, sink) -> None:
    (tmp_path / "Directory.Packages.props").write_text(
        '<Project xmlns="http://schemas.microsoft.com/developer/msbuild/2003">\n'
        "  <ItemGroup>\n"
        '    <PackageVersion Include="Dapper" Version="2.0.0" />\n'
        "  </ItemGroup>\n"
        "</Project>\n",
        encoding="utf-8",
    )

    assert load_cpm_settings(tmp_path, sink).global_version("dapper") == "2.0.0"


def test_parse_project_condition() -> None:
    assert parse_project_condition("'$(MSBuildProjectName)' == 'My.App'") == "My.App"
    assert parse_project_condition("'$(MSBuildProjectName)' != 'My.App'") is None
    assert parse_project_condition("'$(Configuration)' == 'Debug'") is None
