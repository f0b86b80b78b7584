"""Catalogue bounded context: products and their on-hand inventory.

Product rows are owned by the products service; the orders service reads
them and reserves stock against them when line items are recorded.
"""

from protean.domain import Domain

catalogue = Domain(name="catalogue")
