from marshmallow import Schema, fields, validate, RAISE

from storefront.models.order import OrderStatus


class _StrictSchema(Schema):
    class Meta:
        unknown = RAISE


class RegisterSchema(_StrictSchema):
    email = fields.Str(required=True, validate=validate.Length(min=3, max=255))
    password = fields.Str(required=True, validate=validate.Length(min=1, max=128))


class LoginSchema(_StrictSchema):
    email = fields.Str(required=True)
    password = fields.Str(required=True)


class UserUpdateSchema(_StrictSchema):
    email = fields.Str(validate=validate.Length(min=3, max=255))
    password = fields.Str(validate=validate.Length(min=1, max=128))


class CategorySchema(_StrictSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))


class ProductCreateSchema(_StrictSchema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    price_cents = fields.Int(required=True, strict=True, validate=validate.Range(min=1))
    stock = fields.Int(strict=True, load_default=0, validate=validate.Range(min=0))
    description = fields.Str(allow_none=True, load_default=None)
    image_url = fields.Str(allow_none=True, load_default=None)
    category_id = fields.Int(strict=True, allow_none=True, load_default=None, validate=validate.Range(min=1))


class ProductUpdateSchema(_StrictSchema):
    name = fields.Str(validate=validate.Length(min=1, max=200))
    price_cents = fields.Int(strict=True, validate=validate.Range(min=1))
    stock = fields.Int(strict=True, validate=validate.Range(min=0))
    description = fields.Str(allow_none=True)
    image_url = fields.Str(allow_none=True)
    category_id = fields.Int(strict=True, allow_none=True, validate=validate.Range(min=1))


class AddCartItemSchema(_StrictSchema):
    product_id = fields.Int(required=True, strict=True, validate=validate.Range(min=1))
    quantity = fields.Int(required=True, strict=True, validate=validate.Range(min=1))


class OrderStatusSchema(_StrictSchema):
    status = fields.Str(
        required=True,
        validate=validate.OneOf([status.value for status in OrderStatus]),
    )
