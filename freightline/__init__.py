"""
Freightline - Warehouse-to-warehouse freight fulfillment engine
"""
