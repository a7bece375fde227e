"""
Demo Data Generator for the ChezFlora backend

This script seeds a development database with a flower-shop catalog,
customers with address books, orders placed through the checkout workflow,
quotes, promotions, blog posts and testimonials.
"""
import os
import sys
import random
from datetime import timedelta
from decimal import Decimal

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Setup Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

import django
django.setup()

from django.utils import timezone
from faker import Faker

from apps.accounts.models import Address, User
from apps.accounts.services import create_address
from apps.catalog.models import Category, Product, ProductImage, Promotion
from apps.content.models import BlogPost, Comment, Service, ServiceImage, Testimonial
from apps.content.services import create_post
from apps.core.exceptions import ChezFloraException
from apps.core.utils import generate_sku
from apps.quotes.models import Quote, QuoteItem
from apps.shop.models import Cart, Order
from apps.shop.services import add_to_cart, create_order

fake = Faker()

DEMO_PASSWORD = 'flowers123'

CATEGORY_TREE = {
    'Bouquets': ['Roses', 'Seasonal', 'Wedding Bouquets'],
    'Plants': ['Indoor Plants', 'Succulents'],
    'Gifts': ['Vases', 'Candles'],
}

PRODUCT_TEMPLATES = [
    ('Red Rose Bouquet', 'Roses', 29.99, 79.99),
    ('White Rose Dozen', 'Roses', 34.99, 69.99),
    ('Spring Tulip Mix', 'Seasonal', 24.99, 49.99),
    ('Sunflower Bunch', 'Seasonal', 19.99, 39.99),
    ('Peony Delight', 'Seasonal', 39.99, 89.99),
    ('Bridal Cascade', 'Wedding Bouquets', 119.99, 249.99),
    ('Bridesmaid Posy', 'Wedding Bouquets', 39.99, 79.99),
    ('Monstera Deliciosa', 'Indoor Plants', 29.99, 89.99),
    ('Fiddle Leaf Fig', 'Indoor Plants', 49.99, 129.99),
    ('Orchid Phalaenopsis', 'Indoor Plants', 24.99, 59.99),
    ('Echeveria Trio', 'Succulents', 14.99, 29.99),
    ('Cactus Garden', 'Succulents', 19.99, 44.99),
    ('Glass Cylinder Vase', 'Vases', 14.99, 39.99),
    ('Ceramic Bud Vase', 'Vases', 9.99, 24.99),
    ('Lavender Soy Candle', 'Candles', 12.99, 29.99),
]

SERVICE_TEMPLATES = [
    ('Wedding Floristry', 'Full floral design for ceremonies and receptions.', 1500),
    ('Corporate Arrangements', 'Weekly lobby and reception arrangements.', 250),
    ('Event Decoration', 'Table centrepieces and installations for private events.', 600),
    ('Flower Subscription', 'A fresh seasonal bouquet delivered every week.', 45),
]

EVENT_TYPES = ['wedding', 'birthday', 'corporate', 'funeral', 'anniversary']


def generate_users(count=30):
    """Generate customers plus one admin."""
    print(f"Generating {count} customers...")
    users = []

    admin = User.objects.create_user(
        email='admin@chezflora.com',
        password=DEMO_PASSWORD,
        first_name='Flora',
        last_name='Admin',
        role=User.ROLE_ADMIN,
    )

    for _ in range(count):
        user = User.objects.create_user(
            email=fake.unique.email(),
            password=DEMO_PASSWORD,
            first_name=fake.first_name(),
            last_name=fake.last_name(),
            phone=fake.phone_number()[:20],
        )
        users.append(user)

    print(f"Created {len(users)} customers and admin {admin.email}")
    return admin, users


def generate_addresses(users):
    """One to three addresses per customer; the first becomes the default."""
    print("Generating addresses...")
    addresses = []

    for user in users:
        for index in range(random.randint(1, 3)):
            addresses.append(create_address(user, {
                'address_name': 'Home' if index == 0 else fake.word().title(),
                'first_name': user.first_name,
                'last_name': user.last_name,
                'address_line1': fake.street_address(),
                'city': fake.city(),
                'postal_code': fake.postcode(),
                'country': fake.country(),
                'phone': user.phone,
            }))

    print(f"Created {len(addresses)} addresses")
    return addresses


def generate_categories():
    print("Generating categories...")
    categories = {}

    for sort_order, (parent_name, children) in enumerate(CATEGORY_TREE.items()):
        parent = Category.objects.create(
            name=parent_name,
            description=fake.sentence(),
            sort_order=sort_order,
        )
        categories[parent_name] = parent
        for child_order, child_name in enumerate(children):
            categories[child_name] = Category.objects.create(
                name=child_name,
                description=fake.sentence(),
                parent=parent,
                sort_order=child_order,
            )

    print(f"Created {len(categories)} categories")
    return categories


def generate_products(categories):
    print("Generating products...")
    products = []

    for name, category_name, min_price, max_price in PRODUCT_TEMPLATES:
        price = Decimal(str(round(random.uniform(min_price, max_price), 2)))
        product = Product.objects.create(
            name=name,
            description=fake.paragraph(nb_sentences=2),
            price=price,
            stock=random.randint(0, 40),
            category=categories[category_name],
            sku=f"{generate_sku()}{len(products):02d}"[:50],
        )
        ProductImage.objects.create(
            product=product,
            image_url=f"https://images.chezflora.example/products/{product.id}.jpg",
            is_primary=True,
        )
        products.append(product)

    print(f"Created {len(products)} products")
    return products


def generate_promotions(products):
    print("Generating promotions...")
    now = timezone.now()

    spring = Promotion.objects.create(
        name='Spring Sale',
        description='Ten percent off seasonal flowers',
        discount_type=Promotion.TYPE_PERCENTAGE,
        discount_value=Decimal('10'),
        start_date=now - timedelta(days=3),
        end_date=now + timedelta(days=14),
    )
    spring.products.set(random.sample(products, 5))

    mothers_day = Promotion.objects.create(
        name="Mother's Day",
        description='Five off selected bouquets',
        discount_type=Promotion.TYPE_FIXED_AMOUNT,
        discount_value=Decimal('5'),
        start_date=now + timedelta(days=20),
        end_date=now + timedelta(days=30),
    )
    mothers_day.products.set(random.sample(products, 4))

    print("Created 2 promotions")
    return [spring, mothers_day]


def generate_orders(users, products, count=40):
    """Place orders through the real checkout workflow."""
    print(f"Generating up to {count} orders...")
    orders = []
    skipped = 0

    for _ in range(count):
        user = random.choice(users)
        address = Address.objects.filter(user=user, is_default=True).first()
        try:
            for product in random.sample(products, random.randint(1, 3)):
                add_to_cart(user, product.id, random.randint(1, 2))
            order = create_order(
                user,
                shipping_address_id=address.id,
                payment_method=random.choice([choice for choice, _ in Order.PAYMENT_METHOD_CHOICES]),
            )
        except ChezFloraException as e:
            skipped += 1
            print(f"  skipped an order: {e.message}")
            Cart.objects.filter(user=user).delete()
            continue

        order.status = random.choice(['pending', 'processing', 'shipped', 'delivered'])
        order.payment_status = 'paid' if order.status in ('shipped', 'delivered') else 'pending'
        order.save(update_fields=['status', 'payment_status', 'updated_at'])
        orders.append(order)

    print(f"Created {len(orders)} orders ({skipped} skipped for stock)")
    return orders


def generate_quotes(users, count=15):
    print(f"Generating {count} quotes...")
    quotes = []

    for _ in range(count):
        status = random.choice([choice for choice, _ in Quote.STATUS_CHOICES])
        quote = Quote.objects.create(
            user=random.choice(users),
            status=status,
            description=fake.paragraph(nb_sentences=3),
            event_type=random.choice(EVENT_TYPES),
            event_date=fake.date_between(start_date='+7d', end_date='+180d'),
            budget=Decimal(random.randint(200, 5000)),
            validity_date=fake.date_between(start_date='today', end_date='+30d'),
        )
        if status in ('sent', 'accepted', 'declined'):
            for _ in range(random.randint(1, 4)):
                QuoteItem.objects.create(
                    quote=quote,
                    description=fake.sentence(nb_words=4),
                    quantity=random.randint(1, 20),
                    unit_price=Decimal(str(round(random.uniform(5, 150), 2))),
                )
        quotes.append(quote)

    print(f"Created {len(quotes)} quotes")
    return quotes


def generate_content(admin, users):
    print("Generating blog posts, services and testimonials...")

    posts = []
    for _ in range(8):
        posts.append(create_post(admin, {
            'title': fake.sentence(nb_words=6).rstrip('.'),
            'content': '\n\n'.join(fake.paragraphs(nb=4)),
            'status': random.choice(['draft', 'published', 'published']),
            'category': random.choice(['Care Tips', 'Weddings', 'Seasonal', 'Inspiration']),
            'tags': random.sample(['roses', 'plants', 'diy', 'events', 'gifts'], 2),
        }))

    comments = 0
    for post in posts:
        if post.status != BlogPost.STATUS_PUBLISHED:
            continue
        for user in random.sample(users, random.randint(0, 3)):
            Comment.objects.create(
                blog_post=post,
                user=user,
                content=fake.sentence(),
                status=random.choice(['pending', 'approved', 'approved']),
            )
            comments += 1

    for name, description, base_price in SERVICE_TEMPLATES:
        service = Service.objects.create(name=name, description=description, base_price=Decimal(base_price))
        ServiceImage.objects.create(
            service=service,
            image_url=f"https://images.chezflora.example/services/{service.id}.jpg",
            is_primary=True,
        )

    testimonials = 0
    for user in random.sample(users, min(10, len(users))):
        Testimonial.objects.create(
            user=user,
            content=fake.paragraph(nb_sentences=2),
            rating=random.choices([3, 4, 5], weights=[10, 30, 60])[0],
            is_approved=random.random() > 0.3,
        )
        testimonials += 1

    print(f"Created {len(posts)} posts, {comments} comments, "
          f"{len(SERVICE_TEMPLATES)} services, {testimonials} testimonials")


def clear_all_data():
    """Clear all existing data."""
    print("Clearing existing data...")

    for model in (Testimonial, Comment, BlogPost, Service, QuoteItem, Quote, Order,
                  Cart, Promotion, Product, Category, Address, User):
        if model is Category:
            # Children before parents
            Category.objects.filter(parent__isnull=False).delete()
        model.objects.all().delete()

    print("All data cleared")


def main():
    """Main function to generate all data."""
    print("\n" + "="*60)
    print("ChezFlora Demo Data Generator")
    print("="*60 + "\n")

    clear_all_data()

    admin, users = generate_users(30)
    addresses = generate_addresses(users)
    categories = generate_categories()
    products = generate_products(categories)
    promotions = generate_promotions(products)
    orders = generate_orders(users, products, 40)
    quotes = generate_quotes(users, 15)
    generate_content(admin, users)

    print("\n" + "="*60)
    print("Data Generation Complete!")
    print("="*60)
    print(f"\nSummary:")
    print(f"  - Customers: {len(users)} (password: {DEMO_PASSWORD})")
    print(f"  - Addresses: {len(addresses)}")
    print(f"  - Categories: {len(categories)}")
    print(f"  - Products: {len(products)}")
    print(f"  - Promotions: {len(promotions)}")
    print(f"  - Orders: {len(orders)}")
    print(f"  - Quotes: {len(quotes)}")
    print()


if __name__ == '__main__':
    main()
