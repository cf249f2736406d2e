"""Packaging regression tests.

Tests that verify the installed package structure and public surface.
"""

from pathlib import Path


def test_source_layout():
    """Source tree uses the src/ layout with a kernel subpackage."""
    here = Path(__file__).resolve().parent
    repo_root = here.parent
    src_pkg = repo_root / "src" / "proofchain"

    assert (src_pkg / "__init__.py").exists(), "proofchain package should exist in src/"
    assert (src_pkg / "kernel" / "__init__.py").exists(), "proofchain.kernel should be a package"
    assert (repo_root / "pyproject.toml").exists()


def test_import_boundary():
    """Public names import from the package root."""
    import proofchain
    import proofchain.kernel  # noqa: F401

    # in dev mode it's "dev", in installed mode it's "1.0.0"
    assert proofchain.__version__ in ("1.0.0", "dev")
    for name in proofchain.__all__:
        assert hasattr(proofchain, name), name


def test_kernel_has_no_network_dependency():
    """Builders and hashing never import the HTTP stack."""
    kernel_dir = Path(__file__).resolve().parent.parent / "src" / "proofchain" / "kernel"
    for path in kernel_dir.glob("*.py"):
        source = path.read_text(encoding="utf-8")
        assert "import requests" not in source, path.name
        assert "proofchain.client" not in source, path.name
