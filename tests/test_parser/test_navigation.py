"""Tests for model definition lookup (viewscaffold.parser.navigation)."""

from __future__ import annotations

import pytest

from viewscaffold.errors import ModelParsingError
from viewscaffold.parser.navigation import find_model_directive, locate_model_definition


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


class TestLocateModelDefinition:
    def test_points_at_class_line(self, shop_project, product_source):
        location = locate_model_definition("Shop.Models.Product", shop_project)
        assert location.path == str(shop_project / "Shop" / "Models" / "Product.cs")
        expected = product_source.splitlines().index("    public class Product") + 1
        assert location.line == expected

    def test_file_without_class_points_at_top(self, write_cs, tmp_path):
        write_cs("Models/Orphan.cs", "// nothing declared here\n")
        assert locate_model_definition("Orphan", tmp_path).line == 1

    def test_missing_file(self, shop_project):
        with pytest.raises(ModelParsingError, match="Order.cs not found"):
            locate_model_definition("Shop.Models.Order", shop_project)

    def test_missing_file_carries_type(self, shop_project):
        with pytest.raises(ModelParsingError) as exc_info:
            locate_model_definition("Shop.Models.Order", shop_project)
        assert exc_info.value.code == "MODEL_PARSING_ERROR"
        assert exc_info.value.model_type == "Shop.Models.Order"

    @pytest.mark.parametrize("type_name", ["", "  "])
    def test_invalid_type(self, shop_project, type_name):
        with pytest.raises(ModelParsingError, match="Invalid model type"):
            locate_model_definition(type_name, shop_project)


class TestFindModelDirective:
    @pytest.mark.parametrize(
        "source, expected",
        [
            ("@model Shop.Models.Product\n<h1>Hi</h1>", "Shop.Models.Product"),
            ("@model IEnumerable<Shop.Models.Product>\n", "IEnumerable<Shop.Models.Product>"),
            ("@using Shop\n@model Product?\n", "Product?"),
        ],
    )
    def test_found(self, source, expected):
        assert find_model_directive(source) == expected

    def test_absent(self):
        assert find_model_directive("<p>No model</p>") is None
