"""Built-in commerce entity schemas."""
from typing import Dict

from recordmap.schema.models import EntityField, EntityFieldSchema
from recordmap.schema.provider import InMemorySchemaProvider

PRODUCT = EntityFieldSchema(
    entity="Product",
    fields=[
        EntityField("name", "string", required=True, description="Display name for the product"),
        EntityField("slug", "string", description="URL-friendly identifier (auto-generated if not provided)"),
        EntityField("description", "string", description="Product description (HTML supported)"),
        EntityField("enabled", "boolean", description="Whether the product is published"),
        EntityField("facetValueCodes", "array", description="Array of facet value codes to assign"),
        EntityField("assetUrls", "array", description="URLs of images to attach"),
        EntityField("featuredAssetUrl", "string", description="URL of the featured/main image"),
        EntityField("id", "id", readonly=True, description="Internal product ID"),
        EntityField("customFields", "json", description="Custom field values"),
    ],
)

PRODUCT_VARIANT = EntityFieldSchema(
    entity="ProductVariant",
    fields=[
        EntityField("sku", "string", required=True, description="Unique stock keeping unit"),
        EntityField("name", "string", description="Display name for the variant"),
        EntityField("price", "money", required=True, description="Price in cents (e.g., 1999 = $19.99)"),
        EntityField("productName", "string", description="Name of the parent product (for auto-creation)"),
        EntityField("productSlug", "string", description="URL slug of the parent product"),
        EntityField("productId", "id", description="ID of the parent product"),
        EntityField("stockOnHand", "number", description="Available inventory quantity"),
        EntityField("trackInventory", "boolean", description="Whether to track stock levels"),
        EntityField("taxCategoryCode", "string", description="Code of the tax category"),
        EntityField("customFields", "json", description="Custom field values"),
    ],
)

CUSTOMER = EntityFieldSchema(
    entity="Customer",
    fields=[
        EntityField("emailAddress", "string", required=True, description="Unique email address"),
        EntityField("firstName", "string", required=True, description="Customer first name"),
        EntityField("lastName", "string", required=True, description="Customer last name"),
        EntityField("phoneNumber", "string", description="Contact phone number"),
        EntityField("title", "string", description="Title (Mr, Mrs, etc.)"),
        EntityField("groupCodes", "relation", description="Array of customer group codes to assign"),
        EntityField("addresses", "json", description="Array of customer addresses"),
        EntityField("customFields", "json", description="Custom field values"),
    ],
)

ORDER = EntityFieldSchema(
    entity="Order",
    fields=[
        EntityField("code", "string", description="Unique order code (auto-generated if not provided)"),
        EntityField("customerEmail", "string", required=True, description="Email of the customer placing the order"),
        EntityField("lines", "relation", required=True, description="Array of line items"),
        EntityField("shippingAddress", "json", description="Shipping address details"),
        EntityField("billingAddress", "json", description="Billing address (defaults to shipping if not provided)"),
        EntityField("shippingMethodCode", "string", description="Code of the shipping method to use"),
        EntityField("orderPlacedAt", "date", description="Date the order was placed"),
        EntityField("state", "string", readonly=True, description="Order state"),
        EntityField("customFields", "json", description="Custom field values"),
    ],
)

COLLECTION = EntityFieldSchema(
    entity="Collection",
    fields=[
        EntityField("name", "string", required=True, description="Display name for the collection"),
        EntityField("slug", "string", description="URL-friendly identifier (auto-generated if not provided)"),
        EntityField("description", "string", description="Collection description (HTML supported)"),
        EntityField("parentSlug", "string", description="Slug of parent collection (for hierarchy)"),
        EntityField("parentId", "id", description="ID of parent collection"),
        EntityField("position", "number", description="Sort order within parent (0 = first)"),
        EntityField("isPrivate", "boolean", description="Whether collection is hidden from customers"),
        EntityField("filters", "json", description="Filter rules for automatic product assignment"),
    ],
)

BUILTIN_SCHEMAS: Dict[str, EntityFieldSchema] = {
    schema.entity: schema for schema in (PRODUCT, PRODUCT_VARIANT, CUSTOMER, ORDER, COLLECTION)
}


def default_provider() -> InMemorySchemaProvider:
    """Schema provider serving the built-in entities."""
    return InMemorySchemaProvider(BUILTIN_SCHEMAS)
