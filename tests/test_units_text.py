from unitengine.parser.units_text import iter_units_lines, parse_units_text


def test_parse_units_text_tolerates_comments_and_commas():
    text = """
    distance: km
    pace: min/km   # running pace
    weight: Pounds,
    # ignored
    bad line
    : missing
    """

    result = parse_units_text(text)
    assert result.units == {"distance": "kilometer", "pace": "minperkm", "weight": "pound"}
    assert len(result.warnings) == 2
    assert "missing ':'" in result.warnings[0]
    assert "empty series name" in result.warnings[1]


def test_parse_units_text_reports_unknown_units():
    result = parse_units_text("hr: bpm\nlength: furlongs;\nnotes:")
    assert result.units == {"hr": "bpm"}
    assert any("unknown unit 'furlongs'" in warning for warning in result.warnings)
    assert any("empty unit" in warning for warning in result.warnings)


def test_parse_units_text_empty_input():
    result = parse_units_text(None)
    assert result.units == {}
    assert result.warnings == []


def test_iter_units_lines():
    assert list(iter_units_lines("cadence: spm\ntemp: degF")) == [
        ("cadence", "stepsPerMinute"),
        ("temp", "fahrenheit"),
    ]
