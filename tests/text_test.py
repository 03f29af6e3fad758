import logging

from slputils.text import Text

text = Text(logger=logging.getLogger("text_test"))


def test_motd_plain_string():
    assert text.motd_parse("A Minecraft Server") == "A Minecraft Server"


def test_motd_chat_object():
    motd = {
        "text": "Hello ",
        "extra": [
            {"text": "world", "color": "gold"},
            " and ",
            {"text": "you", "extra": [{"text": "!", "color": "red"}]},
        ],
    }

    assert text.motd_parse(motd) == "Hello §6world and you§c!"


def test_motd_list_of_components():
    assert text.motd_parse(["a", {"text": "b"}]) == "ab"


def test_motd_empty():
    assert text.motd_parse("") == "Unknown"
    assert text.motd_parse({}) == "Unknown"
    assert text.motd_parse({"text": ""}) == "Unknown"


def test_motd_bad_extra():
    assert text.motd_parse({"extra": 5}) == "Unknown"


def test_c_filter():
    assert text.c_filter("§aHello §lthere§r ") == "Hello there"
    assert text.c_filter("line one\nline two") == "line one\nline two"
    assert text.c_filter("bell\x07") == "bell\\x07"


def test_color_ansi():
    assert text.color_ansi("§aHi") == "\u001b[92mHi\u001b[0m"
    assert text.color_ansi("§kx§ly") == "x\u001b[1my\u001b[0m"
    assert text.color_ansi("no colors") == "no colors"


def test_color_mine():
    assert text.color_mine("yellow") == "§e"
    assert text.color_mine("DARK_RED") == "§4"
    assert text.color_mine("#ff00ff") == ""
