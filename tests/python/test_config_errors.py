"""
Tests for configuration and error types.
"""

import pytest
import numpy as np

import ndmat
from ndmat import Matrix, Config, DType
from ndmat.core.error import (
    MatrixError,
    ReshapeError,
    OutOfBoundsError,
    InvalidModeError,
    KernelTooLargeError,
    NDMAT_ERROR_RESHAPE,
    NDMAT_ERROR_INVALID_MODE,
    check_mode,
)


class TestConfig:
    """Test the configuration value and the global default."""

    def test_defaults(self):
        """Test default configuration."""
        cfg = ndmat.get_config()
        assert cfg.default_type is DType.FLOAT64
        assert cfg.ignore_trailing_dims is True

    def test_config_is_immutable(self):
        """Test Config cannot be mutated."""
        cfg = Config()
        with pytest.raises(Exception):
            cfg.default_type = DType.FLOAT32

    def test_integer_default_rejected(self):
        """Test the default type must be a float kind."""
        with pytest.raises(ValueError):
            Config(default_type='uint8')

    def test_set_config_returns_previous(self):
        """Test set_config swaps the global value."""
        previous = ndmat.set_config(default_type='single')
        assert previous.default_type is DType.FLOAT64
        assert Matrix([2, 2]).type_name == 'single'
        ndmat.set_config(previous)
        assert Matrix([2, 2]).type_name == 'double'

    def test_explicit_config_is_inherited(self):
        """Test derived matrices keep the explicit configuration."""
        cfg = Config(default_type=DType.FLOAT32)
        m = Matrix([2, 2], [1, 2, 3, 4], config=cfg)
        assert m.type_name == 'single'
        out = m + 1
        assert out.config is cfg
        assert out.type_name == 'single'
        assert m.sum().config is cfg

    def test_ignore_trailing_dims_policy(self):
        """Test size comparison with and without trailing unit dimensions."""
        from ndmat.dense._tools import check_size_equals
        assert check_size_equals([2, 3], [2, 3, 1, 1])
        assert not check_size_equals([2, 3], [2, 3, 1], ignore_trailing_dims=False)
        assert not check_size_equals([2, 3], [2, 3, 2])


class TestErrors:
    """Test the exception taxonomy."""

    def test_builtin_bases(self):
        """Test errors derive from the matching builtin."""
        assert issubclass(ReshapeError, ValueError)
        assert issubclass(OutOfBoundsError, IndexError)
        assert issubclass(KernelTooLargeError, MatrixError)

    def test_codes_and_messages(self):
        """Test default messages come from the code table."""
        err = ReshapeError()
        assert err.code == NDMAT_ERROR_RESHAPE
        assert err.message == "Invalid reshape"

    def test_from_code(self):
        """Test the factory returns the matching subclass."""
        err = MatrixError.from_code(NDMAT_ERROR_INVALID_MODE, "sort")
        assert isinstance(err, InvalidModeError)
        assert str(err) == "sort: Invalid mode"

    def test_check_mode(self):
        """Test mode validation is case-insensitive."""
        assert check_mode('Descend', ('ascend', 'descend'), 'sort') == 'descend'
        with pytest.raises(InvalidModeError):
            check_mode('sideways', ('ascend', 'descend'), 'sort')

    def test_reshape_error_raised(self):
        """Test errors surface at the point of detection."""
        m = Matrix([2, 3])
        with pytest.raises(ValueError):
            m.reshape(4, 2)
        assert m.size == [2, 3]


class TestLogging:
    """Test logging setup."""

    def test_null_handler_installed(self):
        """Test the package logger is silent by default."""
        import logging
        handlers = logging.getLogger("ndmat").handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)

    def test_debug_records(self, caplog):
        """Test kernel construction logs at debug level."""
        with caplog.at_level("DEBUG", logger="ndmat"):
            ndmat.gaussian_kernel(1.0)
        assert any("Gaussian kernel" in r.getMessage() for r in caplog.records)


class TestWarnings:
    """Test lossy-but-legal situations warn."""

    def test_logical_inplace_promotion(self):
        """Test an in-place operation on a logical matrix warns."""
        m = Matrix([2, 1], [True, False], is_boolean=True)
        with pytest.warns(UserWarning):
            m.plus(1)
        assert m.type_name == 'double'
        np.testing.assert_array_equal(m.get_data(), [2, 1])
