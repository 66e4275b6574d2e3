from utils.text import normalize_text, matches_search, parse_hashtags, hashtags_match


def test_normalize_strips_romanian_diacritics():
    assert normalize_text("  Ștefan și Țara  ") == "stefan si tara"
    assert normalize_text("Brașov, Câmpina, Înălțimi") == "brasov, campina, inaltimi"


def test_normalize_cedilla_variants():
    assert normalize_text("ş ţ") == "s t"


def test_normalize_non_text():
    assert normalize_text(None) == ""
    assert normalize_text(42) == ""


def test_matches_search():
    assert matches_search("Vacanță la mare", "vacanta")
    assert matches_search("vacanta la mare", "VACANȚĂ")
    assert not matches_search("Vacanță la mare", "munte")
    assert not matches_search("", "x")
    assert not matches_search("text", "")


def test_parse_hashtags_from_text():
    assert parse_hashtags("#Beach  #summer word #beach") == ["beach", "summer"]


def test_parse_hashtags_from_list():
    assert parse_hashtags(["Beach", "#Sun", 5, ""]) == ["beach", "sun"]


def test_parse_hashtags_empty():
    assert parse_hashtags(None) == []
    assert parse_hashtags("no tags here") == []
    assert parse_hashtags({"tag": "x"}) == []


def test_hashtags_match():
    assert hashtags_match(["vară", "mare"], "vara")
    assert not hashtags_match(["mare"], "munte")
    assert not hashtags_match("mare", "mare")


def test_normalize_phone_adds_leading_zero():
    from security.pin import normalize_phone, is_valid_phone

    assert normalize_phone("69123456") == "069123456"
    assert normalize_phone(" 069 123 456 ") == "069123456"
    assert normalize_phone("12345") == "12345"
    assert normalize_phone(None) == ""
    assert is_valid_phone(normalize_phone("79123456"))
