"""Constants for the spreadsheet import service.

The keyword tables below are the built-in seed for header matching. They
are copied into a ``KeywordTables`` instance and may be extended through the
``[matching]`` configuration section.
"""

# Supported upload extensions
ALLOWED_EXTENSIONS = {"csv", "xlsx"}

# Header keywords for scalar and metadata fields, in priority order
FIELD_KEYWORDS: dict[str, list[str]] = {
    "song_no": [
        "no", "no.", "song no", "song no.", "楽曲no", "楽曲no.", "曲no", "曲no.",
        "番号", "ナンバー", "id", "track no", "曲番号", "曲id", "#",
    ],
    "implementation_no": [
        "implementation no", "implementation no.", "実装no", "実装no.",
        "impl no", "impl no.", "実装順", "実装番号", "release no", "release number",
    ],
    "name": [
        "name", "song name", "title", "song title", "楽曲名", "曲名", "タイトル",
        "名前", "名称", "track name", "楽曲",
    ],
    "artist": [
        "artist", "vocal", "singer", "unit", "アーティスト", "歌手", "ボーカル",
        "ユニット", "ボーカリスト", "演奏", "歌",
    ],
    "lyricist": ["lyricist", "lyrics", "lyrics by", "作詞", "作詞者", "作詞家", "sakushi"],
    "composer": ["composer", "composition", "composed by", "作曲", "作曲者", "作曲家", "sakkyoku"],
    "arranger": ["arranger", "arrangement", "arranged by", "編曲", "編曲者", "henkyoku"],
    "duration": ["duration", "length", "time", "時間", "長さ", "曲の長さ", "演奏時間", "play time"],
    "bpm": ["bpm", "tempo", "テンポ", "速さ", "speed"],
    "added_date": [
        "added date", "release date", "date", "追加日", "実装日", "日付",
        "公開日", "リリース日", "実装",
    ],
    "tags": ["tags", "tag", "genre", "category", "タグ", "ジャンル", "カテゴリ", "分類", "type"],
}

# Localized synonyms for well-known difficulty tiers (lowercase tier name -> words)
TIER_SYNONYMS: dict[str, list[str]] = {
    "easy": ["かんたん", "簡単", "イージー", "e"],
    "normal": ["ふつう", "普通", "ノーマル", "n"],
    "hard": ["むずかしい", "難しい", "ハード", "h"],
    "expert": ["おに", "鬼", "エキスパート", "ex", "exp"],
    "master": ["マスター", "m", "mas"],
    "append": ["アペンド", "拡張", "a", "apd"],
    "special": ["スペシャル", "sp"],
    "basic": ["ベーシック", "bsc", "bas"],
    "advanced": ["アドバンスド", "adv"],
    "extreme": ["エクストリーム", "ext"],
    "beginner": ["ビギナー", "beg"],
    "extra": ["エクストラ"],
    "challenge": ["チャレンジ"],
    "ultima": ["アルティマ", "ult"],
    "lunatic": ["ルナティック"],
    "debut": ["デビュー"],
    "regular": ["レギュラー"],
    "pro": ["プロ"],
}

# Abbreviation table used by the fallback detector (token -> tier name)
ABBREVIATIONS: dict[str, str] = {
    "e": "easy",
    "n": "normal",
    "h": "hard",
    "ex": "expert",
    "exp": "expert",
    "m": "master",
    "mas": "master",
    "a": "append",
    "sp": "special",
    "b": "basic",
    "bsc": "basic",
    "adv": "advanced",
    "ext": "extreme",
    "かんたん": "easy",
    "ふつう": "normal",
    "むずかしい": "hard",
    "おに": "expert",
    "鬼": "expert",
}

# Sub-field suffix templates; "{}" is replaced by each difficulty variant
LEVEL_TEMPLATES = ["{}", "{} lv", "{} lv.", "{}レベル", "{} level", "{}_lv", "{}難易度", "lv {}"]
COMBO_TEMPLATES = [
    "{} combo", "{} notes", "{}コンボ", "{} コンボ", "{}_combo", "{}ノーツ", "{} ノーツ",
    "{}コンボ数", "{} combos",
]
VIDEO_TEMPLATES = [
    "{} url", "{} youtube", "{} link", "{}リンク", "{} yt", "{}_url", "{}_yt", "{} video", "{}動画",
]

# Tokens that mark a header as a combo or video column
COMBO_MARKERS = ("combo", "notes", "note", "コンボ", "ノーツ")
VIDEO_MARKERS = ("url", "youtube", "youtu", "link", "リンク", "video", "動画")

# Regular expressions recognising a generic difficulty-tier header. "{tokens}"
# is replaced by an alternation of every known tier word and abbreviation;
# group "tier" captures the token used to resolve the difficulty.
FALLBACK_PATTERN_TEMPLATES = [
    r"^(?P<tier>{tokens})(?:[\s._-]*(?:lv\.?|level|レベル|難易度))?$",
    r"^(?:lv\.?|level)[\s._-]*(?P<tier>{tokens})$",
]

# Keywords shorter than this only match a header exactly
MIN_FUZZY_KEYWORD_LENGTH = 3

YOUTUBE_URL_PATTERN = (
    r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?|shorts)/|.*[?&]v=)|youtu\.be/)"
    r"([^\"&?/\s]{11})"
)
YOUTUBE_ID_PATTERN = r"^[A-Za-z0-9_-]{11}$"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={}"

# Delimiters accepted between tags
TAG_DELIMITERS = r"[,、;]"

PLACEHOLDER_TITLE = "Untitled (row {})"
