import varcodec


def test_public_api_is_exported() -> None:
    for name in varcodec.__all__:
        assert hasattr(varcodec, name), name


def test_version_string() -> None:
    assert varcodec.__version__ == "0.1.0"


def test_error_hierarchy() -> None:
    assert issubclass(varcodec.GrammarError, (varcodec.VarcodecError, ValueError))
    assert issubclass(varcodec.UnsupportedValueError, varcodec.VariantTypeError)
    assert issubclass(varcodec.VariantTypeError, TypeError)
    assert not issubclass(varcodec.InternalConsistencyError, varcodec.VarcodecError)
