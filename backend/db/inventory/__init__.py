"""
Storefront inventory.

Models:
- ProductInventory (available quantity or weight per product, optionally per variant)

Lookups:
- load_stock_snapshot (product + inventory record + stock policy for one check)
"""
