"""
Catalog Models - Flower Shop Catalog
Tables: Categories, Products, ProductImages, Promotions
"""
from django.core.validators import MinValueValidator
from django.db import models
from apps.core.models import BaseModel


class Category(BaseModel):
    """
    Product category. Categories nest through ``parent``.
    """
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, null=True)
    image_url = models.CharField(max_length=500, blank=True, null=True)
    parent = models.ForeignKey(
        'self',
        on_delete=models.PROTECT,
        related_name='children',
        blank=True,
        null=True,
    )
    is_active = models.BooleanField(default=True)
    sort_order = models.IntegerField(default=0)

    class Meta:
        db_table = 'catalog_categories'
        verbose_name = 'Category'
        verbose_name_plural = 'Categories'
        ordering = ['sort_order', 'name']

    def __str__(self):
        return self.name


class Product(BaseModel):
    """
    Product in the catalog.
    Stock only changes through admin edits, order placement and cancellation.
    """
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    stock = models.PositiveIntegerField(default=0)
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        related_name='products',
        blank=True,
        null=True,
    )
    is_active = models.BooleanField(default=True)
    sku = models.CharField(max_length=50, unique=True)

    class Meta:
        db_table = 'catalog_products'
        verbose_name = 'Product'
        verbose_name_plural = 'Products'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} (${self.price})"


class ProductImage(BaseModel):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='images')
    image_url = models.CharField(max_length=500)
    is_primary = models.BooleanField(default=False)
    sort_order = models.IntegerField(default=0)

    class Meta:
        db_table = 'catalog_product_images'
        ordering = ['sort_order', 'created_at']

    def __str__(self):
        return self.image_url


class Promotion(BaseModel):
    """
    Time-boxed discount applied to a set of products.
    The discounted price is computed on read (see catalog.pricing), never stored.
    """
    TYPE_PERCENTAGE = 'percentage'
    TYPE_FIXED_AMOUNT = 'fixed_amount'
    DISCOUNT_TYPE_CHOICES = [
        (TYPE_PERCENTAGE, 'Percentage'),
        (TYPE_FIXED_AMOUNT, 'Fixed amount'),
    ]

    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, null=True)
    discount_type = models.CharField(max_length=20, choices=DISCOUNT_TYPE_CHOICES)
    discount_value = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    is_active = models.BooleanField(default=True)
    products = models.ManyToManyField(Product, related_name='promotions', blank=True)

    class Meta:
        db_table = 'catalog_promotions'
        verbose_name = 'Promotion'
        verbose_name_plural = 'Promotions'
        ordering = ['-start_date']

    def __str__(self):
        return f"{self.name} ({self.discount_value} {self.discount_type})"
