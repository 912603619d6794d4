"""Item and category models"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field
from uuid import uuid4


class Item(BaseModel):
    """A photographed belonging in a user's collection"""
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    category: str  # Category.id
    icon: str = ""
    image: Optional[str] = None  # base64 data URL of the photo
    generated_icon: Optional[str] = None  # SVG data URL built from the photo or name
    icon_style: Optional[str] = None
    icon_colors: list[str] = Field(default_factory=list)
    location: str = ""
    quantity: int = 1
    notes: str = ""
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    is_collected: bool = False


class Category(BaseModel):
    """Item category"""
    id: str
    name: str
    icon: str
    color: str = "#AEB6BF"
    item_count: int = 0  # denormalized, maintained by the store


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id="food", name="食品・食材", icon="🍎", color="#FF6B6B"),
    Category(id="kitchen", name="キッチン用品", icon="🍳", color="#4ECDC4"),
    Category(id="clothes", name="衣類", icon="👕", color="#45B7D1"),
    Category(id="electronics", name="電子機器", icon="📱", color="#96CEB4"),
    Category(id="books", name="本・書籍", icon="📚", color="#FFEAA7"),
    Category(id="cosmetics", name="コスメ・美容", icon="💄", color="#DDA0DD"),
    Category(id="stationery", name="文房具", icon="✏️", color="#98D8C8"),
    Category(id="toys", name="おもちゃ・ホビー", icon="🎮", color="#F7DC6F"),
    Category(id="cleaning", name="掃除用品", icon="🧹", color="#85C1E9"),
    Category(id="medicine", name="薬・医療品", icon="💊", color="#F1948A"),
    Category(id="furniture", name="家具・インテリア", icon="🪑", color="#D7BDE2"),
    Category(id="sports", name="スポーツ用品", icon="⚽", color="#82E0AA"),
    Category(id="other", name="その他", icon="📦", color="#AEB6BF"),
)
