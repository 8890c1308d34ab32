"""
Product catalog for the fitness storefront.

Declarative data only: the filter vocabulary shown on listing pages and the
products the voice assistant can navigate to. Filter values here are the
canonical spellings every voice-derived filter is normalized to.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class Product(BaseModel):
    """A single catalog product."""
    id: str = Field(..., description="Catalog identifier used in product routes")
    name: str = Field(..., description="Display name, matched against spoken references")
    description: str = Field(default="", description="Short marketing description")
    sizes: List[str] = Field(default_factory=list, description="Sizes the product page offers")
    category: str = Field(..., description="Top-level category: gym, yoga or running")
    price: float = Field(..., description="Price in dollars")
    color: Optional[str] = None
    brand: Optional[str] = None
    material: Optional[str] = None
    gender: Optional[str] = None
    sub_category: Optional[str] = None


# ============================================================================
# Filter vocabulary
# ============================================================================

FILTER_OPTIONS: Dict[str, List[str]] = {
    "colors": ["Black", "White", "Grey", "Navy", "Blue", "Red", "Green", "Purple", "Pink", "Orange"],
    "sizes": ["XS", "S", "M", "L", "XL", "XXL", "One Size"],
    "materials": ["Cotton", "Polyester", "Spandex", "Nylon", "Merino Wool", "Natural Rubber", "TPE", "Cork"],
    "genders": ["Men", "Women", "Unisex"],
    "brands": ["Nike", "Adidas", "Lululemon", "Under Armour", "Reebok", "Manduka", "Gaiam", "Asics", "Brooks"],
    "subCategories": [
        "T-Shirts", "Tank Tops", "Shorts", "Leggings", "Hoodies", "Sports Bras",
        "Yoga Mats", "Yoga Blocks", "Straps", "Running Shoes", "Jackets", "Socks",
        "Dumbbells", "Resistance Bands", "Gym Bags",
    ],
}

FILTER_DIMENSIONS = tuple(FILTER_OPTIONS.keys())

# ============================================================================
# Products
# ============================================================================

PRODUCTS: List[Product] = [
    Product(
        id="gym-001",
        name="Performance Dry-Fit T-Shirt",
        description="Lightweight moisture-wicking tee for high-intensity training.",
        sizes=["S", "M", "L", "XL"],
        category="gym", price=29.99, color="Black", brand="Nike",
        material="Polyester", gender="Men", sub_category="T-Shirts",
    ),
    Product(
        id="gym-002",
        name="Seamless Training Tank",
        description="Breathable racerback tank with four-way stretch.",
        sizes=["XS", "S", "M", "L"],
        category="gym", price=34.00, color="Pink", brand="Lululemon",
        material="Nylon", gender="Women", sub_category="Tank Tops",
    ),
    Product(
        id="gym-003",
        name="Flex Training Shorts",
        description="7-inch shorts with zip pocket and built-in liner.",
        sizes=["S", "M", "L", "XL", "XXL"],
        category="gym", price=39.99, color="Navy", brand="Under Armour",
        material="Polyester", gender="Men", sub_category="Shorts",
    ),
    Product(
        id="gym-004",
        name="Hex Dumbbell Pair",
        description="Rubber-coated hex dumbbells, sold as a pair.",
        sizes=["One Size"],
        category="gym", price=59.00, color="Black", brand="Reebok",
        material="Natural Rubber", gender="Unisex", sub_category="Dumbbells",
    ),
    Product(
        id="gym-005",
        name="Power Resistance Band Set",
        description="Five looped bands from light to extra heavy.",
        sizes=["One Size"],
        category="gym", price=24.50, color="Green", brand="Gaiam",
        material="Natural Rubber", gender="Unisex", sub_category="Resistance Bands",
    ),
    Product(
        id="gym-006",
        name="Duffel Gym Bag",
        description="Water-resistant duffel with ventilated shoe compartment.",
        sizes=["One Size"],
        category="gym", price=45.00, color="Grey", brand="Adidas",
        material="Polyester", gender="Unisex", sub_category="Gym Bags",
    ),
    Product(
        id="yoga-001",
        name="PRO Yoga Mat",
        description="6mm high-density mat with closed-cell surface.",
        sizes=["One Size"],
        category="yoga", price=129.00, color="Purple", brand="Manduka",
        material="Natural Rubber", gender="Unisex", sub_category="Yoga Mats",
    ),
    Product(
        id="yoga-002",
        name="Eco Cork Yoga Block",
        description="Firm cork block for support in standing and seated poses.",
        sizes=["One Size"],
        category="yoga", price=18.00, color="Orange", brand="Gaiam",
        material="Cork", gender="Unisex", sub_category="Yoga Blocks",
    ),
    Product(
        id="yoga-003",
        name="Align High-Rise Leggings",
        description="Buttery-soft leggings for yoga and low-impact flows.",
        sizes=["XS", "S", "M", "L", "XL"],
        category="yoga", price=98.00, color="Black", brand="Lululemon",
        material="Spandex", gender="Women", sub_category="Leggings",
    ),
    Product(
        id="yoga-004",
        name="Cinch Yoga Strap",
        description="Cotton strap with metal D-ring for deeper stretches.",
        sizes=["One Size"],
        category="yoga", price=12.99, color="Blue", brand="Gaiam",
        material="Cotton", gender="Unisex", sub_category="Straps",
    ),
    Product(
        id="yoga-005",
        name="Travel Yoga Mat",
        description="Foldable 1.5mm TPE mat that fits in a carry-on.",
        sizes=["One Size"],
        category="yoga", price=42.00, color="Green", brand="Reebok",
        material="TPE", gender="Unisex", sub_category="Yoga Mats",
    ),
    Product(
        id="yoga-006",
        name="Studio Sports Bra",
        description="Medium-support bra with removable cups.",
        sizes=["XS", "S", "M", "L"],
        category="yoga", price=48.00, color="White", brand="Nike",
        material="Spandex", gender="Women", sub_category="Sports Bras",
    ),
    Product(
        id="run-001",
        name="Gel-Nimbus Running Shoes",
        description="Max-cushion neutral trainer for long runs.",
        sizes=["S", "M", "L", "XL"],
        category="running", price=159.95, color="Blue", brand="Asics",
        material="Nylon", gender="Men", sub_category="Running Shoes",
    ),
    Product(
        id="run-002",
        name="Ghost Running Shoes",
        description="Smooth-riding daily trainer.",
        sizes=["XS", "S", "M", "L"],
        category="running", price=139.95, color="Pink", brand="Brooks",
        material="Nylon", gender="Women", sub_category="Running Shoes",
    ),
    Product(
        id="run-003",
        name="Windrunner Jacket",
        description="Packable wind jacket with reflective details.",
        sizes=["S", "M", "L", "XL", "XXL"],
        category="running", price=99.99, color="Red", brand="Nike",
        material="Polyester", gender="Unisex", sub_category="Jackets",
    ),
    Product(
        id="run-004",
        name="Merino Running Socks",
        description="Cushioned merino socks, three-pack.",
        sizes=["S", "M", "L"],
        category="running", price=22.00, color="Grey", brand="Brooks",
        material="Merino Wool", gender="Unisex", sub_category="Socks",
    ),
    Product(
        id="run-005",
        name="Pacer Running Hoodie",
        description="Lightweight hoodie with thumbholes for cold mornings.",
        sizes=["XS", "S", "M", "L", "XL"],
        category="running", price=65.00, color="Navy", brand="Adidas",
        material="Cotton", gender="Women", sub_category="Hoodies",
    ),
]
