from typing import Any, Dict

ONE_PIECE_DESCRIPTION = (
    "Gol D. Roger, vua hải tặc với khối tài sản vô giá One Piece, đã bị xử tử. "
    "Trước khi chết, ông tiết lộ rằng kho báu của mình được giấu ở Grand Line. "
    "Monkey D. Luffy, một cậu bé với ước mơ trở thành vua hải tặc, vô tình ăn phải trái ác quỷ Gomu Gomu, "
    "biến cơ thể cậu thành cao su. Giờ đây, cậu cùng các đồng đội hải tặc mũ rơm bắt đầu cuộc hành trình "
    "tìm kiếm kho báu One Piece."
)


def mock_manga(manga_id: int) -> Dict[str, Any]:
    """Запасная запись, которая показывается, когда API недоступен."""
    return {
        "id": manga_id,
        "title": "One Piece",
        "description": ONE_PIECE_DESCRIPTION,
        "coverImage": "https://m.media-amazon.com/images/I/51FVFCrSp0L._AC_UF1000,1000_QL80_.jpg",
        "author": "Eiichiro Oda",
        "status": "ongoing",
        "releaseYear": 1999,
        "genres": ["Action", "Adventure", "Comedy", "Fantasy", "Shounen", "Super Power"],
        "chapters": [
            {"id": 1, "number": 1088, "title": "Cuộc chiến cuối cùng", "createdAt": "2023-08-10", "viewCount": 150000},
            {"id": 2, "number": 1087, "title": "Luffy vs Kaido", "createdAt": "2023-08-03", "viewCount": 145000},
            {"id": 3, "number": 1086, "title": "Bí mật của Laugh Tale", "createdAt": "2023-07-27", "viewCount": 140000},
        ],
        "viewCount": 15000000,
    }
