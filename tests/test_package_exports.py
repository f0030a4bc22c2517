import pytest

import stagemix
from stagemix.domain.sources import InputSource
from stagemix.recommendation import generate


def test_lazy_exports_resolve_to_module_objects() -> None:
    assert stagemix.InputSource is InputSource
    assert stagemix.generate is generate
    assert stagemix.infer("Snare Top") is InputSource.SNARE


def test_unknown_export_raises_attribute_error() -> None:
    with pytest.raises(AttributeError):
        stagemix.not_a_real_export  # noqa: B018
