import pytest

from portal.core.bundle import DependencyBundle
from portal.core.keys import ServiceKey


def test_lookup_by_key_or_string():
    """Entries resolve by ServiceKey or plain string."""
    blog = object()
    bundle = DependencyBundle({ServiceKey.BLOG: blog})

    assert bundle.get("blog") is blog
    assert bundle.get(ServiceKey.BLOG) is blog
    assert ServiceKey.BLOG in bundle


def test_missing_name_defaults():
    """Absent names return the default."""
    bundle = DependencyBundle({})

    assert bundle.get("court") is None
    assert bundle.get("court", "fallback") == "fallback"
    with pytest.raises(KeyError):
        bundle["court"]


def test_bundle_is_read_only():
    """The bundle cannot be modified."""
    bundle = DependencyBundle({"blog": object()})

    with pytest.raises(TypeError):
        bundle["court"] = object()
    with pytest.raises(TypeError):
        bundle._services = {}


def test_source_mutation_does_not_leak():
    """Changing the source mapping does not change the bundle."""
    source = {"blog": object()}
    bundle = DependencyBundle(source)

    source["court"] = object()

    assert "court" not in bundle
    assert bundle.to_dict() == {"blog": bundle["blog"]}


def test_empty_default():
    bundle = DependencyBundle()
    assert len(bundle) == 0
    assert repr(bundle) == "DependencyBundle([])"
