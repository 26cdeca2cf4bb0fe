# Category taxonomy shared by the transaction classifier and the receipt
# parser. Keyword tables are ordered: the first table that matches wins.

FOOD = "Food & Dining"
TRANSPORT = "Transportation"
SHOPPING = "Shopping"
ENTERTAINMENT = "Entertainment"
BILLS = "Bills & Utilities"
HEALTHCARE = "Healthcare"
EDUCATION = "Education"

SALARY = "Salary"
FREELANCE = "Freelance"
BONUS = "Bonus"
BUSINESS = "Business"
INVESTMENT = "Investment"

OTHER = "Other"

EXPENSE_CATEGORIES = (
    FOOD,
    TRANSPORT,
    SHOPPING,
    ENTERTAINMENT,
    BILLS,
    HEALTHCARE,
    EDUCATION,
)
INCOME_CATEGORIES = (SALARY, FREELANCE, BONUS, BUSINESS, INVESTMENT)
ALL_CATEGORIES = EXPENSE_CATEGORIES + INCOME_CATEGORIES + (OTHER,)

# ---------------- Transaction descriptions ----------------

# (category, confidence, keywords) in evaluation order.
INCOME_KEYWORDS = [
    (SALARY, 0.9, ["salary", "payroll", "wage"]),
    (FREELANCE, 0.8, ["freelance", "contract"]),
    (BONUS, 0.8, ["bonus", "commission"]),
    (BUSINESS, 0.8, ["business", "profit", "sale"]),
    (INVESTMENT, 0.8, ["investment", "dividend", "return"]),
]
INCOME_DEFAULT_CONFIDENCE = 0.6

EXPENSE_KEYWORDS = [
    (
        FOOD,
        0.85,
        [
            "restaurant", "cafe", "grocery", "food", "dining", "lunch",
            "dinner", "breakfast", "pizza", "burger", "kfc", "mcdonalds",
            "dominos", "subway", "biryani", "karahi", "daal", "roti", "naan",
            "chai", "lassi", "haleem", "nihari", "kebab", "tikka", "samosa",
            "pakora", "chaat", "kulfi", "falooda",
        ],
    ),
    (
        TRANSPORT,
        0.8,
        [
            "gas", "fuel", "uber", "taxi", "bus", "train", "parking",
            "petrol", "careem", "rickshaw", "metro", "cng", "diesel", "toll",
            "qingqi", "chingchi", "suzuki", "corolla", "civic", "mehran",
            "cultus", "alto",
        ],
    ),
    (
        SHOPPING,
        0.75,
        [
            "store", "shop", "amazon", "purchase", "buy", "mall", "daraz",
            "market", "bazaar", "clothes", "shoes", "khaadi", "gul ahmed",
            "alkaram", "sapphire", "ideas", "centaurus", "emporium",
            "liberty", "anarkali",
        ],
    ),
    (
        ENTERTAINMENT,
        0.8,
        [
            "movie", "cinema", "game", "music", "concert", "netflix",
            "youtube", "spotify", "gaming", "coke studio", "lollywood",
            "bollywood", "drama", "ptv", "ary", "geo", "hum tv",
        ],
    ),
    (
        BILLS,
        0.9,
        [
            "electric", "water", "internet", "phone", "rent", "mortgage",
            "insurance", "electricity", "gas bill", "wifi", "wapda", "kesc",
            "ssgc", "sngpl", "ptcl", "jazz", "telenor", "ufone", "zong",
            "nayatel", "stormfiber",
        ],
    ),
    (
        HEALTHCARE,
        0.85,
        [
            "doctor", "hospital", "medicine", "pharmacy", "clinic", "medical",
            "health", "agha khan", "shaukat khanum", "liaquat", "jinnah",
            "civil hospital", "pims", "services hospital",
        ],
    ),
    (
        EDUCATION,
        0.85,
        [
            "school", "college", "university", "tuition", "books", "fees",
            "education", "lums", "iba", "nust", "fast", "comsats", "uet",
            "punjab university", "karachi university",
        ],
    ),
]
EXPENSE_DEFAULT_CONFIDENCE = 0.5

# ---------------- Receipts ----------------

# (category, merchant substrings, raw-text keywords) in evaluation order.
RECEIPT_CATEGORY_TABLE = [
    (
        FOOD,
        [
            "starbucks", "coffee", "restaurant", "cafe", "pizza", "burger",
            "kfc", "mcdonalds", "mcdonald's", "subway", "dominos", "food",
            "dining",
        ],
        ["latte", "sandwich", "combo", "meal"],
    ),
    (
        SHOPPING,
        [
            "walmart", "target", "amazon", "shop", "store", "market",
            "superstore", "supermarket",
        ],
        ["groceries", "clothing", "electronics", "household"],
    ),
    (
        TRANSPORT,
        [
            "shell", "gas", "fuel", "station", "uber", "lyft", "taxi",
            "transport",
        ],
        ["unleaded", "gallons", "price/gal"],
    ),
    (
        HEALTHCARE,
        ["pharmacy", "drug", "cvs", "walgreens", "medical", "health"],
        ["prescription", "medicine"],
    ),
    (
        ENTERTAINMENT,
        ["movie", "cinema", "theater", "game", "netflix", "spotify"],
        ["ticket", "admission"],
    ),
    (
        BILLS,
        ["electric", "water", "internet", "phone", "utility", "bill"],
        ["electricity", "wifi", "service charge"],
    ),
]

# Short merchant-only lookup used by the legacy receipt pass.
LEGACY_MERCHANT_TO_CATEGORY = [
    ("starbucks", FOOD),
    ("coffee", FOOD),
    ("walmart", SHOPPING),
    ("target", SHOPPING),
    ("shell", TRANSPORT),
    ("gas", TRANSPORT),
    ("amazon", SHOPPING),
    ("online", SHOPPING),
    ("restaurant", FOOD),
    ("food", FOOD),
    ("uber", TRANSPORT),
    ("lyft", TRANSPORT),
    ("pizza", FOOD),
    ("burger", FOOD),
    ("kfc", FOOD),
    ("mcdonalds", FOOD),
]
