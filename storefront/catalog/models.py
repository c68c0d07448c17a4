from typing import List, Optional
from pydantic import BaseModel, Field


class Product(BaseModel):
    id: str
    name: str
    category: str = ""
    price: float = 0
    rating: float = 0
    reviews: int = 0
    description: Optional[str] = None
    created_at: Optional[str] = None


class ProductImage(BaseModel):
    id: Optional[str] = None
    product_id: str
    image_url: str
    display_order: int = 0
    is_primary: bool = False


class ProductIn(BaseModel):
    """Payload admin (création ou mise à jour d'un produit)."""
    name: str = Field(min_length=1, max_length=200)
    category: str = Field(min_length=1, max_length=100)
    price: float = Field(ge=0)
    description: Optional[str] = None
    rating: float = Field(default=0, ge=0, le=5)
    reviews: int = Field(default=0, ge=0)
    # URLs déjà hébergées; la première devient l'image principale
    images: List[str] = Field(default_factory=list)

    def product_fields(self) -> dict:
        return self.model_dump(exclude={"images"})
