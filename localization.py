import datetime


class Translator:
    """Lookup table for the few strings the data core produces itself."""

    WEEKDAYS = {
        "en": ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"],
        "ja": ["月", "火", "水", "木", "金", "土", "日"],
    }

    def __init__(self, language: str = "en") -> None:
        self.language = language
        self.translations = {
            "en": {},
            "ja": {
                "Upper body": "上半身",
                "Lower body": "下半身",
                "Core": "体幹",
                "Cardio": "有酸素",
                "Goal reached! Keep up the great work!": "素晴らしい！目標を達成しました！この調子で頑張りましょう！",
                "Almost there! Keep pushing!": "あと少しで目標達成です！頑張ってください！",
                "Right on track! Keep this pace!": "順調に進んでいます！このペースを維持しましょう！",
                "Good start! Stay consistent!": "良いスタートです！コツコツと続けていきましょう！",
                "One step at a time towards your goal!": "目標に向かって一歩ずつ進んでいきましょう！",
            },
        }

    def set_language(self, lang: str) -> None:
        self.language = lang

    def gettext(self, key: str) -> str:
        return self.translations.get(self.language, {}).get(key, key)

    def category_label(self, category) -> str:
        return self.gettext(category.label)

    def weekday_short(self, day: datetime.date) -> str:
        names = self.WEEKDAYS.get(self.language, self.WEEKDAYS["en"])
        return names[day.weekday()]
