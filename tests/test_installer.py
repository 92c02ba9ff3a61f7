"""Tests for plugin installer (protocol-based)."""

import logging
import tempfile
from pathlib import Path

import pytest
from fakes import RecordingInstaller
from fakes import SpyResolver
from fakes import make_spec
from plugin_installer import ConflictingSourceError
from plugin_installer import Definition
from plugin_installer import GitSource
from plugin_installer import InstallError
from plugin_installer import InvalidOptionError
from plugin_installer import PluginInstaller
from plugin_installer import RegistrySource
from plugin_installer import Requirement
from plugin_installer import Settings
from plugin_installer import build_source_list
from plugin_installer import install_from_specs


def _installer(tmpdir: str, resolver: SpyResolver, settings: Settings | None = None) -> PluginInstaller:
    return PluginInstaller(
        resolver=resolver,
        plugin_root=Path(tmpdir) / "plugins",
        settings=settings or Settings({"deployment": True, "frozen": True}),
        default_remotes=["https://plugins.example.org"],
    )


def test_install_from_registry():
    """Test installing resolved specs, requested and transitive."""
    with tempfile.TemporaryDirectory() as tmpdir:
        backend = RecordingInstaller()
        spec_a = make_spec("foo", backend)
        spec_b = make_spec("bar", backend)
        resolver = SpyResolver(specs=[spec_a, spec_b])

        result = _installer(tmpdir, resolver).install(["foo"], {})

        assert result == {"foo": spec_a, "bar": spec_b}
        assert backend.installed == ["foo", "bar"]
        _, sources = resolver.calls[0]
        assert sources == [RegistrySource(remotes=("https://plugins.example.org",))]


def test_install_creates_plugin_root():
    """Test plugin root is created and recorded in settings."""
    with tempfile.TemporaryDirectory() as tmpdir:
        installer = _installer(tmpdir, SpyResolver())

        installer.install(["foo"], {})

        assert installer.plugin_root.is_dir()
        assert installer.settings["path"] == str(installer.plugin_root)


def test_install_from_git_with_branch():
    """Test git options produce one git source with the branch."""
    with tempfile.TemporaryDirectory() as tmpdir:
        resolver = SpyResolver()

        _installer(tmpdir, resolver).install(["foo"], {"git": "https://example.org/foo.git", "branch": "main"})

        requirements, sources = resolver.calls[0]
        assert requirements == [Requirement("foo", (">= 0",))]
        assert sources == [GitSource(uri="https://example.org/foo.git", branch="main")]


def test_install_local_git_alias(caplog):
    """Test local_git is installed as git with one deprecation notice."""
    with tempfile.TemporaryDirectory() as tmpdir:
        resolver = SpyResolver()
        options = {"local_git": "/src/foo"}

        with caplog.at_level(logging.WARNING):
            _installer(tmpdir, resolver).install(["foo"], options)

        assert options == {"git": "/src/foo"}
        assert resolver.calls[0][1] == [GitSource(uri="/src/foo")]
        assert len([r for r in caplog.records if "deprecated" in r.getMessage()]) == 1


def test_install_explicit_version_and_sources():
    """Test version and explicit remotes flow into resolution."""
    with tempfile.TemporaryDirectory() as tmpdir:
        resolver = SpyResolver()

        _installer(tmpdir, resolver).install(
            ["foo", "bar"], {"version": ["~> 1.0", "< 1.5"], "source": ["https://a.example", "https://b.example"]}
        )

        requirements, sources = resolver.calls[0]
        assert [r.version for r in requirements] == [("~> 1.0", "< 1.5"), ("~> 1.0", "< 1.5")]
        assert sources == [RegistrySource(remotes=("https://a.example", "https://b.example"))]


def test_conflicting_sources_never_resolve():
    """Test conflicting git sources fail before the resolver is called."""
    with tempfile.TemporaryDirectory() as tmpdir:
        resolver = SpyResolver()
        installer = _installer(tmpdir, resolver)

        with pytest.raises(ConflictingSourceError):
            installer.install(["foo"], {"git": "https://example.org/foo.git", "local_git": "/src/foo"})

        assert resolver.calls == []
        assert not installer.plugin_root.exists()


def test_invalid_option_never_resolves():
    """Test branch without git fails before the resolver is called."""
    with tempfile.TemporaryDirectory() as tmpdir:
        resolver = SpyResolver()

        with pytest.raises(InvalidOptionError):
            _installer(tmpdir, resolver).install(["foo"], {"branch": "main"})

        assert resolver.calls == []


def test_install_failure_is_fail_fast():
    """Test a failing install aborts the call with no result."""
    with tempfile.TemporaryDirectory() as tmpdir:
        backend = RecordingInstaller(fail_on={"bar"})
        resolver = SpyResolver(specs=[make_spec("foo", backend), make_spec("bar", backend), make_spec("baz", backend)])

        with pytest.raises(InstallError, match="bar"):
            _installer(tmpdir, resolver).install(["foo"], {})

        assert backend.installed == ["foo"]


def test_install_restores_settings():
    """Test deployment/frozen are restored after installation."""
    with tempfile.TemporaryDirectory() as tmpdir:
        settings = Settings({"deployment": True, "frozen": True})
        resolver = SpyResolver(settings=settings)

        _installer(tmpdir, resolver, settings).install(["foo"], {})

        assert resolver.settings_seen == [(False, False)]
        assert settings["deployment"] is True
        assert settings["frozen"] is True


def test_install_definition_skips_lock():
    """Test a prebuilt definition is resolved, installed and never locked."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock_path = Path(tmpdir) / "plugins.lock"
        backend = RecordingInstaller()
        spec = make_spec("foo", backend)
        definition = Definition(
            [Requirement("foo", (">= 0",))],
            build_source_list({"source": "https://plugins.example.org"}),
            SpyResolver(specs=[spec]),
            lock_path=lock_path,
        )

        result = _installer(tmpdir, SpyResolver()).install_definition(definition)

        assert result == {"foo": spec}
        assert backend.installed == ["foo"]
        assert not lock_path.exists()


def test_install_from_specs_preserves_order():
    """Test result map follows resolver order."""
    backend = RecordingInstaller()
    specs = [make_spec(name, backend) for name in ["c", "a", "b"]]

    result = install_from_specs(specs)

    assert list(result) == ["c", "a", "b"]
    assert backend.installed == ["c", "a", "b"]


class PrebuiltDefinition:
    """Definition that resolves in place and exposes results only via specs."""

    def __init__(self, specs):
        self._resolved = specs
        self.specs = []
        self.lock_skipped = False

    def resolve_remotely(self) -> None:
        self.specs = list(self._resolved)

    def skip_lock(self) -> None:
        self.lock_skipped = True


def test_install_definition_reads_specs():
    """Test installed specs come from the definition after resolution."""
    with tempfile.TemporaryDirectory() as tmpdir:
        backend = RecordingInstaller()
        spec = make_spec("foo", backend)
        definition = PrebuiltDefinition([spec])

        result = _installer(tmpdir, SpyResolver()).install_definition(definition)

        assert result == {"foo": spec}
        assert backend.installed == ["foo"]
        assert definition.lock_skipped


def test_install_rejects_bare_string_names():
    """Test a plugin name passed as a string fails before resolution."""
    with tempfile.TemporaryDirectory() as tmpdir:
        resolver = SpyResolver()

        with pytest.raises(InvalidOptionError):
            _installer(tmpdir, resolver).install("foo", {})  # type: ignore[arg-type]

        assert resolver.calls == []
