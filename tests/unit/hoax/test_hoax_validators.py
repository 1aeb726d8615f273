"""Tests for hoax content validation."""

import pytest

from hoaxify.core.modules.hoax.validators import validate_hoax_content
from hoaxify.errors import ValidationError


class TestValidateHoaxContent:
    @pytest.mark.parametrize("content", ["a" * 10, "a" * 5000, "Hoax content"])
    def test_accepts_bounds(self, content):
        assert validate_hoax_content(content) == content

    @pytest.mark.parametrize("content", [None, "", "a" * 9, "a" * 5001])
    def test_rejects_out_of_bounds(self, content):
        with pytest.raises(ValidationError) as exc_info:
            validate_hoax_content(content)
        assert "content" in exc_info.value.field_errors
