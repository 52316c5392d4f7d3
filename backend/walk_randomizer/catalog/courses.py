"""
Static catalog of Tokyo walking courses.

The catalog is the ground truth for every other component: filter results keep
catalog order, history snapshots are rebuilt from ``Course.to_dict`` payloads,
and reviews reference courses by ``id``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Iterable
from urllib.parse import urlencode

from walk_randomizer.core.errors import ValidationFailure


class Season(str, Enum):
    spring = "spring"
    summer = "summer"
    autumn = "autumn"
    winter = "winter"

    @property
    def label(self) -> str:
        return _SEASON_LABELS[self]


class WeatherStyle(str, Enum):
    clear = "clear"
    cloudy = "cloudy"
    rainy = "rainy"

    @property
    def label(self) -> str:
        return _WEATHER_LABELS[self]


class Duration(IntEnum):
    short = 30
    medium = 60
    long = 90


_SEASON_LABELS = {
    Season.spring: "春",
    Season.summer: "夏",
    Season.autumn: "秋",
    Season.winter: "冬",
}

_WEATHER_LABELS = {
    WeatherStyle.clear: "晴天",
    WeatherStyle.cloudy: "曇天",
    WeatherStyle.rainy: "雨天",
}

ALL_SEASONS = (Season.spring, Season.summer, Season.autumn, Season.winter)


@dataclass(frozen=True)
class Course:
    """
    One walking route of the catalog.

    Attributes:
        id (int): Stable identity used by favorites, history and reviews
        name (str): Display name of the course
        area (str): Neighbourhood the course is in
        duration (Duration): Duration bucket in minutes (30, 60 or 90)
        distance (float): Length of the course in kilometers
        seasons (tuple[Season, ...]): Seasons the course is recommended for
        weather_styles (tuple[WeatherStyle, ...]): Weather the course tolerates
        description (str): Display description
    """
    id: int
    name: str
    area: str
    duration: Duration
    distance: float
    seasons: tuple[Season, ...]
    weather_styles: tuple[WeatherStyle, ...]
    description: str
    start_point: str | None = None
    end_point: str | None = None
    highlights: tuple[str, ...] = field(default_factory=tuple)
    access_info: str | None = None
    difficulty: str | None = None
    duration_note: str | None = None
    recommended_times: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.id, int) or isinstance(self.id, bool) or self.id <= 0:
            raise ValidationFailure(f"Course id must be a positive integer, got {self.id!r}")
        try:
            object.__setattr__(self, "duration", Duration(self.duration))
        except ValueError as exc:
            raise ValidationFailure(f"Course {self.id}: unsupported duration {self.duration!r}") from exc
        if self.distance is None or float(self.distance) <= 0:
            raise ValidationFailure(f"Course {self.id}: distance must be positive")
        object.__setattr__(self, "distance", float(self.distance))
        object.__setattr__(self, "seasons", _unique_tags(self.id, "seasons", Season, self.seasons))
        object.__setattr__(
            self, "weather_styles", _unique_tags(self.id, "weather_styles", WeatherStyle, self.weather_styles)
        )
        object.__setattr__(self, "highlights", tuple(self.highlights or ()))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "area": self.area,
            "duration": int(self.duration),
            "distance": self.distance,
            "seasons": [s.value for s in self.seasons],
            "weather_styles": [w.value for w in self.weather_styles],
            "description": self.description,
            "start_point": self.start_point,
            "end_point": self.end_point,
            "highlights": list(self.highlights),
            "access_info": self.access_info,
            "difficulty": self.difficulty,
            "duration_note": self.duration_note,
            "recommended_times": self.recommended_times,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Course":
        if not isinstance(data, dict):
            raise TypeError("Course snapshot must be a JSON object")
        return cls(
            id=data["id"],
            name=str(data["name"]),
            area=str(data["area"]),
            duration=data["duration"],
            distance=data["distance"],
            seasons=tuple(data["seasons"]),
            weather_styles=tuple(data["weather_styles"]),
            description=str(data.get("description") or ""),
            start_point=data.get("start_point"),
            end_point=data.get("end_point"),
            highlights=tuple(data.get("highlights") or ()),
            access_info=data.get("access_info"),
            difficulty=data.get("difficulty"),
            duration_note=data.get("duration_note"),
            recommended_times=data.get("recommended_times"),
        )


def _unique_tags(course_id: int, field_name: str, enum_cls: type[Enum], values: Iterable[Any]) -> tuple:
    if isinstance(values, (str, bytes)):
        raise ValidationFailure(f"Course {course_id}: {field_name} must be a collection")
    tags = []
    for value in values or ():
        try:
            tag = enum_cls(value)
        except ValueError as exc:
            raise ValidationFailure(f"Course {course_id}: unknown {field_name} value {value!r}") from exc
        if tag not in tags:
            tags.append(tag)
    if not tags:
        raise ValidationFailure(f"Course {course_id}: {field_name} must not be empty")
    return tuple(tags)


def build_catalog(courses: Iterable[Course]) -> tuple[Course, ...]:
    catalog = tuple(courses)
    seen: set[int] = set()
    for course in catalog:
        if course.id in seen:
            raise ValidationFailure(f"Duplicate course id {course.id} in catalog")
        seen.add(course.id)
    return catalog


_SPRING = (Season.spring,)
_SUMMER = (Season.summer,)
_AUTUMN = (Season.autumn,)
_WINTER = (Season.winter,)
_FAIR = (WeatherStyle.clear, WeatherStyle.cloudy)
_WET = (WeatherStyle.rainy, WeatherStyle.cloudy)

COURSES: tuple[Course, ...] = build_catalog([
    # spring
    Course(
        id=1,
        name="目黒川の桜道",
        area="中目黒",
        duration=Duration.medium,
        distance=3.8,
        seasons=_SPRING,
        weather_styles=_FAIR,
        description="約800本の桜が川沿いに続く人気スポット。春の陽気な散歩に最適です。",
        start_point="中目黒駅",
        end_point="池尻大橋駅",
        highlights=("目黒川の桜並木", "川沿いのカフェ"),
        access_info="東急東横線・日比谷線 中目黒駅すぐ",
        difficulty="やさしい",
        recommended_times="午前中または夜桜の時間帯",
    ),
    Course(
        id=2,
        name="上野公園の桜散策",
        area="上野",
        duration=Duration.long,
        distance=5.2,
        seasons=_SPRING,
        weather_styles=_FAIR,
        description="広大な敷地に約1200本の桜。博物館や動物園も楽しめる充実コースです。",
        highlights=("さくら通り", "不忍池", "東京国立博物館"),
        access_info="JR上野駅 公園口すぐ",
    ),
    Course(
        id=3,
        name="千鳥ヶ淵の桜トンネル",
        area="千代田区",
        duration=Duration.short,
        distance=1.8,
        seasons=_SPRING,
        weather_styles=_FAIR,
        description="皇居のお堀沿いに続く桜のトンネル。都心の静かな散歩道です。",
        start_point="九段下駅",
        end_point="半蔵門駅",
    ),
    # summer
    Course(
        id=4,
        name="等々力渓谷の涼散歩",
        area="等々力",
        duration=Duration.medium,
        distance=3.0,
        seasons=_SUMMER,
        weather_styles=_FAIR,
        description="東京23区唯一の渓谷。木陰と川のせせらぎで涼しく過ごせます。",
        start_point="等々力駅",
        end_point="等々力不動尊",
        difficulty="階段あり",
    ),
    Course(
        id=5,
        name="昭和記念公園の緑道",
        area="立川",
        duration=Duration.long,
        distance=6.0,
        seasons=_SUMMER,
        weather_styles=_FAIR,
        description="広大な敷地の木陰道。噴水エリアで涼むこともできる夏の定番コースです。",
    ),
    Course(
        id=6,
        name="浜離宮恩賜庭園散策",
        area="汐留",
        duration=Duration.short,
        distance=1.9,
        seasons=_SUMMER,
        weather_styles=_FAIR,
        description="海風が心地よい潮入の池がある庭園。都会のオアシスです。",
    ),
    Course(
        id=7,
        name="お台場海浜公園の夕涼み",
        area="お台場",
        duration=Duration.medium,
        distance=3.5,
        seasons=_SUMMER,
        weather_styles=_FAIR,
        description="レインボーブリッジを眺めながら海沿いを散歩。夕方からがおすすめです。",
        recommended_times="夕方",
    ),
    # autumn
    Course(
        id=8,
        name="明治神宮外苑のイチョウ並木",
        area="青山",
        duration=Duration.short,
        distance=1.5,
        seasons=_AUTUMN,
        weather_styles=_FAIR,
        description="146本のイチョウが作る黄金のトンネル。秋の東京を代表する景色です。",
        start_point="青山一丁目駅",
        end_point="聖徳記念絵画館",
    ),
    Course(
        id=9,
        name="六義園の紅葉散策",
        area="駒込",
        duration=Duration.medium,
        distance=2.8,
        seasons=_AUTUMN,
        weather_styles=_FAIR,
        description="美しい日本庭園で紅葉を楽しむ。ライトアップ時期もおすすめです。",
    ),
    Course(
        id=10,
        name="代々木公園の紅葉道",
        area="代々木",
        duration=Duration.long,
        distance=5.0,
        seasons=_AUTUMN,
        weather_styles=_FAIR,
        description="広い芝生と色づく木々。ゆったりと秋を感じられる都会のオアシスです。",
    ),
    Course(
        id=11,
        name="国営昭和記念公園の銀杏並木",
        area="立川",
        duration=Duration.long,
        distance=5.5,
        seasons=_AUTUMN,
        weather_styles=_FAIR,
        description="200mに渡る黄金のイチョウ並木。広大な敷地でゆったり散策できます。",
    ),
    # winter
    Course(
        id=12,
        name="皇居東御苑の静寂散歩",
        area="大手町",
        duration=Duration.medium,
        distance=3.2,
        seasons=_WINTER,
        weather_styles=_FAIR,
        description="冬の凛とした空気の中、江戸城跡を巡る歴史散歩が楽しめます。",
        start_point="大手門",
        end_point="北桔橋門",
    ),
    Course(
        id=13,
        name="築地場外市場の食べ歩き散歩",
        area="築地",
        duration=Duration.short,
        distance=1.2,
        seasons=_WINTER,
        weather_styles=_FAIR,
        description="温かい食べ物を楽しみながら散策。冬の寒さも忘れる美味しい散歩です。",
        recommended_times="午前中",
    ),
    Course(
        id=14,
        name="丸の内イルミネーション散策",
        area="丸の内",
        duration=Duration.medium,
        distance=2.5,
        seasons=_WINTER,
        weather_styles=_FAIR,
        description="美しいイルミネーションが街を彩る冬の夜の散歩コース。",
        recommended_times="日没後",
    ),
    # all seasons, fair weather
    Course(
        id=15,
        name="浅草寺と仲見世通り散策",
        area="浅草",
        duration=Duration.medium,
        distance=2.6,
        seasons=ALL_SEASONS,
        weather_styles=_FAIR,
        description="東京を代表する観光スポット。下町情緒あふれる散歩が楽しめます。",
        start_point="雷門",
        end_point="浅草寺本堂",
        highlights=("雷門", "仲見世通り", "五重塔"),
    ),
    Course(
        id=16,
        name="谷中銀座の下町散歩",
        area="谷中",
        duration=Duration.short,
        distance=1.6,
        seasons=ALL_SEASONS,
        weather_styles=_FAIR,
        description="昭和レトロな商店街と猫がいる街。ゆったりとした時間が流れます。",
    ),
    Course(
        id=17,
        name="表参道・原宿ストリート散歩",
        area="表参道",
        duration=Duration.long,
        distance=4.5,
        seasons=ALL_SEASONS,
        weather_styles=_FAIR,
        description="最新トレンドとおしゃれなカフェが並ぶ街を散策。",
        start_point="原宿駅",
        end_point="表参道駅",
    ),
    # rainy-day courses
    Course(
        id=18,
        name="東京駅地下街探検",
        area="東京駅",
        duration=Duration.short,
        distance=1.5,
        seasons=ALL_SEASONS,
        weather_styles=_WET,
        description="広大な地下街を探検。雨を気にせず、グルメやショッピングを楽しめます。",
    ),
    Course(
        id=19,
        name="新宿地下街散策",
        area="新宿",
        duration=Duration.medium,
        distance=3.0,
        seasons=ALL_SEASONS,
        weather_styles=_WET,
        description="迷宮のような地下街を散策。雨の日でも快適に歩き回れます。",
    ),
    Course(
        id=20,
        name="渋谷スクランブルスクエア周辺",
        area="渋谷",
        duration=Duration.short,
        distance=1.4,
        seasons=ALL_SEASONS,
        weather_styles=_WET,
        description="屋内施設が充実。展望台や商業施設を巡る都市型散歩。",
    ),
    Course(
        id=21,
        name="六本木ヒルズ・ミッドタウン散策",
        area="六本木",
        duration=Duration.medium,
        distance=2.7,
        seasons=ALL_SEASONS,
        weather_styles=_WET,
        description="アートと商業施設を楽しむ雨天対応コース。屋内移動が中心です。",
        start_point="六本木ヒルズ",
        end_point="東京ミッドタウン",
    ),
    Course(
        id=22,
        name="アメ横商店街散策",
        area="上野",
        duration=Duration.short,
        distance=1.3,
        seasons=ALL_SEASONS,
        weather_styles=_WET,
        description="屋根のあるアーケード街。雨でも活気ある下町の雰囲気を楽しめます。",
    ),
    # seasonal extras
    Course(
        id=23,
        name="井の頭公園の新緑散歩",
        area="吉祥寺",
        duration=Duration.medium,
        distance=3.1,
        seasons=_SPRING,
        weather_styles=_FAIR,
        description="池の周りを新緑が彩る季節。ボートに乗るのもおすすめです。",
    ),
    Course(
        id=24,
        name="隅田川テラスの夏夕涼み",
        area="浅草・スカイツリー",
        duration=Duration.long,
        distance=5.8,
        seasons=_SUMMER,
        weather_styles=_FAIR,
        description="川沿いを歩きながらスカイツリーを眺める。夕方からがベストです。",
        start_point="浅草駅",
        end_point="東京スカイツリー",
        recommended_times="夕方",
    ),
    Course(
        id=25,
        name="新宿御苑の紅葉巡り",
        area="新宿",
        duration=Duration.long,
        distance=4.8,
        seasons=_AUTUMN,
        weather_styles=_FAIR,
        description="広大な庭園で多様な紅葉を楽しむ。都会とは思えない静けさです。",
    ),
    Course(
        id=26,
        name="深大寺の初詣散歩",
        area="調布",
        duration=Duration.medium,
        distance=3.4,
        seasons=_WINTER,
        weather_styles=_FAIR,
        description="厳かな雰囲気の古刹と蕎麦屋巡り。冬の澄んだ空気が心地よいコースです。",
        duration_note="蕎麦屋に立ち寄る場合はプラス30分",
    ),
])


def get_course(course_id: int, catalog: Iterable[Course] = COURSES) -> Course | None:
    for course in catalog:
        if course.id == course_id:
            return course
    return None


def search_courses(query: str | None, catalog: Iterable[Course] = COURSES) -> list[Course]:
    """Case-insensitive substring match on course name or area."""
    courses = list(catalog)
    if not query or not query.strip():
        return courses
    needle = query.strip().lower()
    return [c for c in courses if needle in c.name.lower() or needle in c.area.lower()]


def map_url(course: Course) -> str:
    if course.start_point and course.end_point:
        params = {
            "api": "1",
            "origin": course.start_point,
            "destination": course.end_point,
            "travelmode": "walking",
        }
        return f"https://www.google.com/maps/dir/?{urlencode(params)}"
    params = {"api": "1", "query": f"{course.name} {course.area}"}
    return f"https://www.google.com/maps/search/?{urlencode(params)}"


def image_query(course: Course, suffix: str = "Tokyo Japan") -> str:
    return " ".join(part for part in (course.area, course.name, suffix) if part)
