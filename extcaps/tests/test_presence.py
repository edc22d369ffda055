from extcaps.core.manifest.presence import (
    get_path,
    has_keys,
    has_non_empty_string,
    is_non_empty_list,
    is_non_empty_string,
    is_truthy,
)


def test_non_empty_string_rejects_blank_and_non_strings():
    assert is_non_empty_string("popup.html") is True
    assert is_non_empty_string("  x  ") is True
    assert is_non_empty_string("") is False
    assert is_non_empty_string("   ") is False
    assert is_non_empty_string("\t\n") is False
    assert is_non_empty_string(None) is False
    assert is_non_empty_string(1) is False
    assert is_non_empty_string(["a"]) is False


def test_has_non_empty_string_needs_one_real_entry():
    assert has_non_empty_string(["", "  ", "bg.js"]) is True
    assert has_non_empty_string(["", "   "]) is False
    assert has_non_empty_string([]) is False
    assert has_non_empty_string([1, None, {}]) is False
    # A bare string is not a string-array.
    assert has_non_empty_string("bg.js") is False
    assert has_non_empty_string(None) is False


def test_get_path_walks_objects_and_never_raises():
    manifest = {"action": {"default_popup": "p.html"}, "background": "bg.js"}
    assert get_path(manifest, "action.default_popup") == "p.html"
    assert get_path(manifest, "action.missing") is None
    assert get_path(manifest, "background.page") is None
    assert get_path(manifest, "nope.deeper.still", default="d") == "d"
    assert get_path(None, "action") is None
    assert get_path(["action"], "action") is None


def test_get_path_returns_explicit_null_values():
    assert get_path({"devtools_page": None}, "devtools_page", default="d") is None


def test_container_predicates():
    assert is_non_empty_list([{}]) is True
    assert is_non_empty_list([]) is False
    assert is_non_empty_list("abc") is False
    assert is_non_empty_list({"a": 1}) is False

    assert has_keys({"_execute_action": {}}) is True
    assert has_keys({}) is False
    assert has_keys(["a"]) is False

    assert is_truthy("k") is True
    assert is_truthy("   ") is True
    assert is_truthy({"name": "x"}) is True
    assert is_truthy(True) is True
    assert is_truthy(-1) is True
    for falsy in (None, False, 0, 0.0, float("nan"), ""):
        assert is_truthy(falsy) is False


def test_truthiness_keeps_empty_containers():
    assert is_truthy({}) is True
    assert is_truthy([]) is True
