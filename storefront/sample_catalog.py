"""
Sample Catalog - Bundled product records and demo credentials.

Shaped like the public fake-store API responses so the in-memory API
gateway decodes them the same way it would decode a real body
(including the extra "rating" key, which decoding tolerates).
"""

SAMPLE_PRODUCTS = [
    {
        "id": 1,
        "title": "Fjallraven Foldsack No. 1 Backpack",
        "price": "109.95",
        "category": "men's clothing",
        "image": "https://fakestoreapi.com/img/81fPKd-2AYL._AC_SL1500_.jpg",
        "description": "Your perfect pack for everyday use and walks in the forest.",
        "rating": {"rate": 3.9, "count": 120},
    },
    {
        "id": 2,
        "title": "Mens Casual Premium Slim Fit T-Shirts",
        "price": "22.30",
        "category": "men's clothing",
        "image": "https://fakestoreapi.com/img/71-3HjGNDUL._AC_SY879._SX._UX._SY._UY_.jpg",
        "description": "Slim-fitting style, contrast raglan long sleeve.",
        "rating": {"rate": 4.1, "count": 259},
    },
    {
        "id": 5,
        "title": "John Hardy Women's Legends Naga Bracelet",
        "price": "695.00",
        "category": "jewelery",
        "image": "https://fakestoreapi.com/img/71pWzhdJNwL._AC_UL640_QL65_ML3_.jpg",
        "description": "From our Legends Collection, inspired by the mythical water dragon.",
        "rating": {"rate": 4.6, "count": 400},
    },
    {
        "id": 9,
        "title": "WD 2TB Elements Portable External Hard Drive",
        "price": "64.00",
        "category": "electronics",
        "image": "https://fakestoreapi.com/img/61IBBVJvSDL._AC_SY879_.jpg",
        "description": "USB 3.0 and USB 2.0 compatibility, fast data transfers.",
        "rating": {"rate": 3.3, "count": 203},
    },
    {
        "id": 15,
        "title": "BIYLACLESEN Women's 3-in-1 Snowboard Jacket",
        "price": "56.99",
        "category": "women's clothing",
        "image": "https://fakestoreapi.com/img/51Y5NI-I5jL._AC_UX679_.jpg",
        "description": "Detachable liner fabric, warm fleece, windproof.",
        "rating": {"rate": 2.6, "count": 235},
    },
]

SAMPLE_CREDENTIALS = {
    "mor_2314": "83r5^_",
    "johnd": "m38rmF$",
}
