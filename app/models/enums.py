import enum


class IngredientCategory(str, enum.Enum):
    RAU_CU = "rau_cu"
    THIT = "thit"
    CA = "ca"
    GIA_VI = "gia_vi"
    BOT = "bot"
    DAU = "dau"
    DO_KHO = "do_kho"
    KHAC = "khac"


class MeasureUnit(str, enum.Enum):
    KG = "kg"
    G = "g"
    L = "l"
    ML = "ml"
    CHAI = "chai"
    HOP = "hop"
    GOI = "goi"
    CAI = "cai"


class MenuCategory(str, enum.Enum):
    MAIN = "main"
    SIDE = "side"
    DRINK = "drink"
    DESSERT = "dessert"


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class FinancialType(str, enum.Enum):
    REVENUE = "revenue"
    EXPENSE = "expense"


class MovementType(str, enum.Enum):
    IMPORT = "import"
    RESTOCK = "restock"
    EXPORT = "export"


CATEGORY_LABELS = {
    IngredientCategory.RAU_CU: "Rau Củ",
    IngredientCategory.THIT: "Thịt",
    IngredientCategory.CA: "Cá & Hải Sản",
    IngredientCategory.GIA_VI: "Gia Vị",
    IngredientCategory.BOT: "Bột",
    IngredientCategory.DAU: "Dầu Ăn",
    IngredientCategory.DO_KHO: "Đồ Khô",
    IngredientCategory.KHAC: "Khác",
}

UNIT_LABELS = {
    MeasureUnit.KG: "kg",
    MeasureUnit.G: "gram",
    MeasureUnit.L: "lít",
    MeasureUnit.ML: "ml",
    MeasureUnit.CHAI: "chai",
    MeasureUnit.HOP: "hộp",
    MeasureUnit.GOI: "gói",
    MeasureUnit.CAI: "cái",
}

MENU_CATEGORY_LABELS = {
    MenuCategory.MAIN: "Món Chính",
    MenuCategory.SIDE: "Món Phụ",
    MenuCategory.DRINK: "Đồ Uống",
    MenuCategory.DESSERT: "Tráng Miệng",
}

ORDER_STATUS_LABELS = {
    OrderStatus.PENDING: "Chờ Xử Lý",
    OrderStatus.PREPARING: "Đang Chuẩn Bị",
    OrderStatus.READY: "Sẵn Sàng",
    OrderStatus.DELIVERED: "Đã Giao",
    OrderStatus.CANCELLED: "Đã Hủy",
}
