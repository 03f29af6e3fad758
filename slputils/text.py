import re
import traceback

import unicodedata

# formatting codes, e.g. §a (green) or §l (bold)
COLOR_CODE = re.compile(r"§[0-9a-fk-or]?", re.IGNORECASE)


class Text:
    # named chat colors to the legacy § code
    COLORS = {
        "black": "§0",
        "dark_blue": "§1",
        "dark_green": "§2",
        "dark_aqua": "§3",
        "dark_red": "§4",
        "dark_purple": "§5",
        "gold": "§6",
        "gray": "§7",
        "dark_gray": "§8",
        "blue": "§9",
        "green": "§a",
        "aqua": "§b",
        "red": "§c",
        "light_purple": "§d",
        "yellow": "§e",
        "white": "§f",
    }

    # 30: Black, 31: Red, 32: Green, 33: Yellow, 34: Blue, 35: Magenta,
    # 36: Cyan, 37: White, the 9x codes are the bright variants
    ANSI = {
        "0": "30",
        "1": "34",
        "2": "32",
        "3": "36",
        "4": "31",
        "5": "35",
        "6": "33",
        "7": "37",
        "8": "90",
        "9": "94",
        "a": "92",
        "b": "96",
        "c": "91",
        "d": "95",
        "e": "93",
        "f": "97",
        "k": "",  # obfuscated, no ansi equivalent
        "l": "1",
        "m": "9",
        "n": "4",
        "o": "3",
        "r": "0",
    }

    def __init__(self, logger):
        """Initializes the text class

        Args:
            logger (Logger): The logger class
        """
        self.logger = logger

    @staticmethod
    def c_filter(text: str, trim: bool = True) -> str:
        """Removes all color bits from a string

        Args:
            text [str]: The string to remove color bits from
            trim [bool]: Whether to trim the string or not

        Returns:
            [str]: The string without color bits
        """
        text = COLOR_CODE.sub("", text)
        if trim:
            text = text.strip()

        # escape control chars, but keep line breaks
        text = "".join(
            char.encode("unicode_escape").decode("utf-8")
            if unicodedata.category(char) in ("Cc", "Cf", "Cn", "Co", "Cs")
            and char != "\n"
            else char
            for char in text
        )

        return text

    @classmethod
    def color_ansi(cls, text: str) -> str:
        """Changes § color tags to ansi escape codes

        Args:
            text (str): text to change

        Returns:
            str: text with ansi color codes, reset at the end
        """

        def replace(match):
            code = cls.ANSI.get(match.group(0)[1:].lower(), "")
            return f"\u001b[{code}m" if code else ""

        text = COLOR_CODE.sub(replace, text)
        if "\u001b[" in text:
            text += "\u001b[0m"
        return text

    @classmethod
    def color_mine(cls, color: str) -> str:
        # given a color like 'yellow' return the color code like '§e'
        return cls.COLORS.get(str(color).lower(), "")

    def motd_parse(self, motd) -> str:
        """Flattens a description into a string with § color codes

        Args:
            motd (str | dict | list): The description from a status response

        Returns:
            str: The description text, "Unknown" if it is empty
        """
        try:
            if not motd:
                return "Unknown"

            def parse_extra(extra):
                _text = ""
                for ext in extra:
                    if isinstance(ext, str):
                        _text += ext
                    elif isinstance(ext, dict):
                        _text += parse_component(ext)
                return _text

            def parse_component(component):
                _text = ""
                if "color" in component:
                    _text += self.color_mine(color=component["color"])
                if "text" in component:
                    _text += str(component["text"])
                if "extra" in component:
                    _text += parse_extra(component["extra"])
                return _text

            if isinstance(motd, str):
                text = motd
            elif isinstance(motd, list):
                text = parse_extra(motd)
            else:
                text = parse_component(motd)

            if text == "":
                text = "Unknown"

            return text
        except TypeError:
            self.logger.error(f"Failed to parse motd: TypeError (motd: {motd})")
            self.logger.debug(traceback.format_exc())
            return "Unknown"
