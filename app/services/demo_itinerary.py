"""새 파일 생성 시 선택할 수 있는 예시 일정 (시코쿠 여행 첫 3일)."""

from __future__ import annotations

from app.schemas.itinerary import Day, ItineraryAdapter

DEMO_ITINERARY_DATA: list[dict] = [
    {
        "dayId": 1,
        "dateStr": "2026-02-13",
        "displayDate": "2/13 (五)",
        "region": "高松 Takamatsu",
        "events": [
            {
                "id": "d1-1",
                "time": "11:15",
                "title": "抵達高松機場",
                "locationName": "高松機場",
                "type": "FLIGHT",
                "description": "CI 278 抵達，出關後前往 2號乘車處",
                "details": [{"title": "交通", "content": "搭乘 12:00 發車的利木津巴士"}],
            },
            {
                "id": "d1-2",
                "time": "13:00",
                "title": "高松城 (玉藻公園)",
                "locationName": "高松城跡",
                "type": "SIGHTSEEING",
                "description": "巴士於「高松築港」下車即達，體驗餵鯛魚",
                "details": [{"title": "備註", "content": "門票 ¥200 / 寄放行李於高松站"}],
            },
            {
                "id": "d1-3",
                "time": "14:30",
                "title": "★ 栗林公園",
                "locationName": "栗林公園",
                "type": "SIGHTSEEING",
                "description": "米其林三星庭園，必搭「和船」遊湖",
                "details": [{"title": "交通", "content": "搭琴電：高松築港 -> 栗林公園站"}],
            },
            {
                "id": "d1-4",
                "time": "18:30",
                "title": "一鶴 骨付鳥 (高松店)",
                "locationName": "一鶴 高松店",
                "type": "FOOD",
                "description": "香川名物烤雞腿，推薦點「雛鳥」(Hinadori)",
                "details": [{"title": "備註", "content": "排隊名店，建議提早去"}],
            },
            {
                "id": "d1-5",
                "time": "22:00",
                "title": "入住：WeBase Takamatsu",
                "locationName": "WeBase 高松",
                "type": "HOTEL",
                "description": "位於瓦町鬧區，方便移動",
                "details": [{"title": "訂房代號", "content": "待更新"}],
            },
        ],
    },
    {
        "dayId": 2,
        "dateStr": "2026-02-14",
        "displayDate": "2/14 (六)",
        "region": "鳴門 & 祖谷",
        "events": [
            {
                "id": "d2-1",
                "time": "08:22",
                "title": "高松 -> 鳴門 (JR Pass 啟用)",
                "locationName": "JR 高松站",
                "type": "TRAIN",
                "description": "[特急] 渦潮5號 (Uzushio 5) 08:22發 -> 09:05抵達池谷",
                "details": [{"title": "轉乘注意", "content": "在「池谷站」同月台對面轉乘 09:13 普通車往鳴門"}],
            },
            {
                "id": "d2-2",
                "time": "09:30",
                "title": "★ 鳴門漩渦 (渦之道)",
                "locationName": "渦之道",
                "type": "SIGHTSEEING",
                "description": "鳴門站轉搭巴士(約20分)至「鳴門公園」",
                "details": [{"title": "備註", "content": "此時段通常可見漩渦"}],
            },
            {
                "id": "d2-3",
                "time": "11:30",
                "title": "大塚國際美術館",
                "locationName": "大塚國際美術館",
                "type": "SIGHTSEEING",
                "description": "世界名畫陶板複製，紅白歌合戰舞台",
                "details": [{"title": "備註", "content": "門票 ¥3300 / 步行可達"}],
            },
            {
                "id": "d2-4",
                "time": "16:00",
                "title": "德島 -> 大步危",
                "locationName": "JR 大步危站",
                "type": "TRAIN",
                "description": "[特急] 劍山9號 (Tsurugisan 9) 16:00發 -> 17:16抵達",
                "details": [{"title": "Tips", "content": "風景極美，請坐窗邊"}],
            },
            {
                "id": "d2-5",
                "time": "17:30",
                "title": "入住：祖谷溫泉",
                "locationName": "和之宿 祖谷溫泉",
                "type": "HOTEL",
                "description": "搭飯店接駁車前往(需預約)",
                "details": [{"title": "亮點", "content": "搭纜車下去的露天風呂是亮點"}],
            },
        ],
    },
    {
        "dayId": 3,
        "dateStr": "2026-02-15",
        "displayDate": "2/15 (日)",
        "region": "高知 Kochi",
        "events": [
            {
                "id": "d3-1",
                "time": "09:00",
                "title": "大步危峽 遊覽船",
                "locationName": "大步危峽觀光遊覽船",
                "type": "SIGHTSEEING",
                "description": "近距離欣賞峽谷美景",
                "details": [{"title": "交通", "content": "請飯店送至遊覽船搭乘處"}],
            },
            {
                "id": "d3-2",
                "time": "12:02",
                "title": "大步危 -> 高知",
                "locationName": "JR 高知站",
                "type": "TRAIN",
                "description": "[特急] 南風7號 (Nanpu 7) 12:02發 -> 12:53抵達",
                "details": [{"title": "Tips", "content": "利用空檔吃午餐/逛道之驛"}],
            },
            {
                "id": "d3-3",
                "time": "14:00",
                "title": "★ 高知日曜市",
                "locationName": "高知日曜市",
                "type": "SIGHTSEEING",
                "description": "週日限定！長達 1km 的街路市集",
                "details": [{"title": "必吃", "content": "田舍壽司、炸番薯"}],
            },
            {
                "id": "d3-4",
                "time": "18:00",
                "title": "弘人市場 (明神丸)",
                "locationName": "弘人市場",
                "type": "FOOD",
                "description": "高知靈魂美食：炙燒鰹魚 (Tataki)",
                "details": [{"title": "備註", "content": "氣氛熱鬧需併桌"}],
            },
            {
                "id": "d3-5",
                "time": "22:00",
                "title": "入住：Richmond Hotel",
                "locationName": "Richmond Hotel Kochi",
                "type": "HOTEL",
                "description": "位於商店街內，離吃飯逛街最近",
                "details": [{"title": "訂房代號", "content": "待更新"}],
            },
        ],
    },
]


def build_demo_itinerary() -> list[Day]:
    """호출할 때마다 새로 검증된 예시 일정을 반환합니다."""
    return ItineraryAdapter.validate_python(DEMO_ITINERARY_DATA)
