import pytest

from getcalculation.calculators import perimeter_calculator, volume_calculator


def perimeter(shape, **dims):
    return perimeter_calculator.calculate({"shapeType": shape, **dims})


def volume(shape, **dims):
    return volume_calculator.calculate({"shapeType": shape, **dims})


# ── PERIMETER_CALCULATOR ─────────────────────────────────────────────────────

class TestPerimeter:
    @pytest.mark.parametrize("shape,dims,expected", [
        ("rectangle", {"length": 5, "width": 3}, 16),
        ("square", {"side": 4}, 16),
        ("circle", {"radius": 5}, 31.415927),
        ("triangle", {"sideA": 3, "sideB": 4, "sideC": 5}, 12),
        ("triangle", {"side1": 3, "side2": 4, "side3": 5}, 12),
        ("regular-polygon", {"numberOfSides": 6, "sideLength": 2}, 12),
        ("parallelogram", {"base": 6, "side": 4}, 20),
        ("rhombus", {"side": 3}, 12),
        ("trapezoid", {"base1": 8, "base2": 4, "leg1": 5, "leg2": 5}, 22),
        ("trapezoid", {"base1": 5, "base2": 5, "leg1": 3, "leg2": 3}, 16),
    ])
    def test_perimeter(self, shape, dims, expected):
        result = perimeter(shape, **dims)
        assert result["perimeter"] == expected
        assert result["shapeType"] == shape

    def test_circle_from_diameter(self):
        result = perimeter("circle", diameter=10)
        assert result["perimeter"] == 31.415927
        assert result["formula"] == "P = πd"
        assert result["shapeInfo"] == "Circle with radius 5"

    def test_radius_preferred_over_diameter(self):
        assert perimeter("circle", radius=1, diameter=10)["formula"] == "P = 2πr"

    @pytest.mark.parametrize("shape,dims,words", [
        ("rectangle", {"length": 5, "width": 3}, "16"),
        ("circle", {"radius": 5}, "approximately 31.42"),
    ])
    def test_perimeter_in_words(self, shape, dims, words):
        assert perimeter(shape, **dims)["perimeterInWords"] == words

    def test_invalid_triangle(self):
        assert perimeter("triangle", sideA=1, sideB=1, sideC=5) == {
            "error": "Invalid triangle: the sum of any two sides must be greater than the third side"}

    def test_invalid_trapezoid(self):
        result = perimeter("trapezoid", base1=10, base2=2, leg1=1, leg2=1)
        assert result["error"].startswith("Invalid trapezoid")

    @pytest.mark.parametrize("sides", [2, 4.5])
    def test_polygon_needs_whole_sides(self, sides):
        result = perimeter("regular-polygon", numberOfSides=sides, sideLength=1)
        assert result == {
            "error": "Number of sides must be an integer greater than or equal to 3"}

    @pytest.mark.parametrize("shape,dims", [
        ("rectangle", {"length": 5}),
        ("square", {"side": -4}),
        ("circle", {}),
        ("rhombus", {"side": "wide"}),
    ])
    def test_missing_or_non_positive_dimensions(self, shape, dims):
        assert "error" in perimeter(shape, **dims)

    def test_missing_shape(self):
        assert perimeter_calculator.calculate({"length": 5}) == \
            {"error": "Shape type must be specified"}

    def test_unknown_shape(self):
        assert perimeter("hexagram", side=1) == {"error": "Unsupported shape type: hexagram"}

    def test_matching_section_wins(self):
        result = perimeter_calculator.calculate({
            "shapeType": "parallelogram",
            "parallelogram-dimensions": {"base": 6, "side": 4},
            "square-dimensions": {"side": 100},
        })
        assert result["perimeter"] == 20

    def test_polygon_section_alias(self):
        result = perimeter_calculator.calculate({
            "shapeType": "regular-polygon",
            "polygon-dimensions": {"numberOfSides": 5, "sideLength": 3},
        })
        assert result["perimeter"] == 15


# ── VOLUME_CALCULATOR ────────────────────────────────────────────────────────

class TestVolume:
    @pytest.mark.parametrize("shape,dims,expected", [
        ("cube", {"side": 3}, 27),
        ("rectangular-prism", {"length": 2, "width": 3, "height": 4}, 24),
        ("cylinder", {"radius": 3, "height": 5}, 141.371669),
        ("sphere", {"radius": 4}, 268.082573),
        ("cone", {"radius": 3, "height": 4}, 37.699112),
        ("pyramid", {"baseLength": 3, "baseWidth": 4, "height": 5}, 20),
        ("triangular-pyramid", {"baseLength": 6, "baseHeight": 4, "pyramidHeight": 5}, 20),
    ])
    def test_volume(self, shape, dims, expected):
        result = volume(shape, **dims)
        assert result["volume"] == expected
        assert result["shapeType"] == shape

    def test_volume_in_words(self):
        assert volume("cube", side=3)["volumeInWords"] == "27"
        assert volume("sphere", radius=1)["volumeInWords"] == "approximately 4.19"

    def test_calculation_text(self):
        assert volume("cube", side=3)["calculation"] == "V = 3³ = 27"

    def test_negative_radius(self):
        assert volume("cylinder", radius=-3, height=5) == {
            "error": "Cylinder requires positive radius and height values"}

    def test_unknown_shape(self):
        assert volume("torus", radius=1) == {"error": "Unsupported shape type: torus"}

    def test_sectioned(self):
        result = volume_calculator.calculate({
            "shapeType": "cube",
            "cube-dimensions": {"side": "2"},
        })
        assert result["volume"] == 8
