#!/usr/bin/env python3
"""
Debug script para inspeccionar la caché del catálogo en Redis.

Uso:
    python scripts/debug_catalog_cache.py              # resumen de la caché
    python scripts/debug_catalog_cache.py <product_id> # detalle de un producto
    python scripts/debug_catalog_cache.py --clear      # borra la caché
"""

import json
import os
import sys
from collections import Counter
from pprint import pprint
from typing import Any, Dict, List, Optional

import redis

CATALOG_CACHE_KEY = "catalog:products"


def connect_to_redis() -> redis.Redis:
    """Conectar a Redis"""
    try:
        r = redis.Redis(
            host=os.getenv("REDIS_HOST", "localhost"),
            port=int(os.getenv("REDIS_PORT", 6379)),
            decode_responses=True,
            db=0
        )
        r.ping()
        print("✅ Conectado a Redis exitosamente")
        return r
    except redis.ConnectionError:
        print("❌ Error: No se puede conectar a Redis")
        print("💡 Revisa REDIS_HOST / REDIS_PORT o arranca el contenedor de Redis")
        sys.exit(1)


def load_cached_products(r: redis.Redis) -> Optional[List[Dict[str, Any]]]:
    cached = r.get(CATALOG_CACHE_KEY)
    if cached is None:
        return None
    try:
        return json.loads(cached)
    except json.JSONDecodeError:
        print("❌ La caché no contiene JSON válido")
        return []


def print_summary(r: redis.Redis, products: List[Dict[str, Any]]) -> None:
    ttl = r.ttl(CATALOG_CACHE_KEY)
    print(f"\n📦 CATÁLOGO EN CACHÉ ({CATALOG_CACHE_KEY})")
    print("=" * 50)
    print(f"⏰ TTL: {ttl if ttl > 0 else 'No expira'}")
    print(f"🛍️  Productos: {len(products)}")

    out_of_stock = [p for p in products if not p.get("inStock", True)]
    print(f"🚫 Sin stock: {len(out_of_stock)}")

    print("\n📊 Por categoría:")
    for category, count in Counter(p.get("category", "N/A") for p in products).most_common():
        print(f"   {category}: {count}")

    print("\n🔍 Primeros productos:")
    for product in products[:5]:
        sizes = ", ".join(size.get("name", "?") for size in product.get("sizes") or [])
        print(f"   - {product.get('name', 'N/A')} ({product.get('id')}) ₹{product.get('offerPrice')}"
              + (f" [{sizes}]" if sizes else ""))


def main():
    """Función principal"""
    print("🔍 Inspeccionando la caché del catálogo\n")
    r = connect_to_redis()

    if len(sys.argv) > 1 and sys.argv[1] == "--clear":
        deleted = r.delete(CATALOG_CACHE_KEY)
        print("🗑️ Caché borrada" if deleted else "ℹ️ No había caché que borrar")
        return

    products = load_cached_products(r)
    if products is None:
        print("ℹ️ No hay catálogo en caché; se cargará de la base de datos en la próxima petición")
        return

    print_summary(r, products)

    if len(sys.argv) > 1:
        product_id = sys.argv[1]
        print(f"\n🎯 PRODUCTO: {product_id}")
        print("=" * 60)
        match = next((p for p in products if p.get("id") == product_id), None)
        if match:
            pprint(match, width=100, depth=3)
        else:
            print(f"❌ El producto '{product_id}' no está en la caché")

    print("\n🔧 COMANDOS DISPONIBLES:")
    print("1. Ver un producto: python scripts/debug_catalog_cache.py <product_id>")
    print("2. Borrar la caché: python scripts/debug_catalog_cache.py --clear")


if __name__ == "__main__":
    main()
