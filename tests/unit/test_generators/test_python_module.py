"""Tests for the Python license module generator."""

from pathlib import Path

import pytest

from license_catalog.config import ProjectConfig
from license_catalog.errors import ConfigurationError
from license_catalog.generators import PythonModuleGenerator
from license_catalog.models import ArtifactRecord
from license_catalog.resolved import resolve_licenses
from license_catalog.runtime import AlternativeLicenseInfo, LicenseProvider


def _load(source: str) -> dict:
    namespace: dict = {}
    exec(compile(source, "licenses.py", "exec"), namespace)
    return namespace


@pytest.mark.parametrize(
    "package,class_name,module_name",
    [
        ("", "Licenses", "licenses"),
        ("my-app", "Licenses", "licenses"),
        ("myapp", "", "licenses"),
        ("myapp", "class", "licenses"),
        ("myapp", "Licenses", "third-party"),
    ],
)
def test_invalid_names(package, class_name, module_name):
    with pytest.raises(ConfigurationError):
        PythonModuleGenerator(package, class_name, module_name)


def test_output_path():
    generator = PythonModuleGenerator("myapp.legal")
    assert generator.output_path(Path("src")) == Path("src/myapp/legal/licenses.py")


def test_from_config():
    config = ProjectConfig(generated_package="myapp", generated_class="ThirdParty")
    generator = PythonModuleGenerator.from_config(config)
    assert generator.class_name == "ThirdParty"


def test_render_produces_working_provider(sample_catalog):
    source = PythonModuleGenerator("myapp", "ThirdParty").render(resolve_licenses(sample_catalog))

    provider = _load(source)["ThirdParty"]

    assert issubclass(provider, LicenseProvider)
    assert [info.artifact_id for info in provider.all()] == [
        "com.squareup.okhttp3:okhttp",
        "com.squareup.okio:okio",
        "org.example:dual",
    ]
    okio = provider.find_by_artifact_id("com.squareup.okio:okio")
    assert okio.artifact_url is None
    assert okio.copyright_holders == ("Square, Inc.",)
    dual = provider.find_by_artifact_id("org.example:dual")
    assert dual.alternative_licenses == (
        AlternativeLicenseInfo("apache-2.0", "Apache License 2.0", "https://www.apache.org/licenses/LICENSE-2.0"),
    )
    assert dual.additional_licenses == ()
    assert len(provider.find_by_license_name("Apache License 2.0")) == 2
    assert provider.find_by_artifact_id("missing:artifact") is None


def test_strings_are_escaped(sample_catalog):
    sample_catalog.licenses["mit"].artifacts["org.example"].append(
        ArtifactRecord("quoted", copyright_holders=['O\'Brien "Inc"\nLine', "Second"])
    )
    source = PythonModuleGenerator("myapp").render(resolve_licenses(sample_catalog))

    info = _load(source)["Licenses"].find_by_artifact_id("org.example:quoted")

    assert info.copyright_holders == ('O\'Brien "Inc"\nLine', "Second")


def test_empty_catalog():
    provider = _load(PythonModuleGenerator("myapp").render([]))["Licenses"]
    assert provider.all() == []


def test_write(sample_catalog, tmp_path: Path):
    path = PythonModuleGenerator("myapp.legal").write(resolve_licenses(sample_catalog), tmp_path)

    assert path == tmp_path / "myapp" / "legal" / "licenses.py"
    assert "class Licenses(LicenseProvider):" in path.read_text(encoding="utf-8")
