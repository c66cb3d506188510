"""Посты, которые видит публичный сайт, когда хранилище блога недоступно"""
from datetime import datetime, timezone

from cms.domains.blog.entities import calculate_reading_time, calculate_word_count
from cms.domains.blog.schemas import BlogPost


def _post(post_id: str, title: str, slug: str, excerpt: str, content: str, image_url: str, created: datetime) -> BlogPost:
    return BlogPost(
        id=post_id,
        title=title,
        slug=slug,
        excerpt=excerpt,
        content=content,
        image_url=image_url,
        status="published",
        published_at=created,
        created_at=created,
        updated_at=created,
        word_count=calculate_word_count(content),
        reading_time=calculate_reading_time(content),
    )


DEFAULT_BLOGS = [
    _post(
        "1",
        "How Carpooling Saves You Money Every Month",
        "carpooling-saves-money",
        "Learn how sharing rides can reduce your travel costs by up to 75% and put more money back in your pocket.",
        "Carpooling has become one of the most effective ways to cut down on daily commute expenses. "
        "With Snapgo, users are saving an average of ₹3,000-5,000 per month on their travel costs.\n\n"
        "## The Math Behind Savings\n\n"
        "When you share a cab with 3 other verified riders:\n"
        "- A ₹400 solo cab ride becomes ₹100 per person\n"
        "- That's 75% savings on every single trip\n"
        "- Over 20 working days, that's ₹6,000 saved monthly\n\n"
        "## Getting Started\n\n"
        "Download Snapgo today and start matching with verified co-riders heading your way. "
        "Your wallet will thank you!",
        "/images/blog/carpooling-savings.jpg",
        datetime(2024, 12, 1, tzinfo=timezone.utc),
    ),
    _post(
        "2",
        "Safety First: How Snapgo Keeps You Protected",
        "safety-first-snapgo",
        "Discover the safety features that make Snapgo the most trusted ride-sharing platform in India.",
        "At Snapgo, your safety is our top priority. We've built multiple layers of protection to ensure "
        "every ride is secure.\n\n"
        "## Aadhaar Verification\n\n"
        "Every user on Snapgo is verified through Aadhaar KYC powered by DigiLocker.\n\n"
        "## Female-Only Option\n\n"
        "Women riders can choose to match only with other verified female riders.",
        "/images/blog/safety-features.jpg",
        datetime(2024, 11, 15, tzinfo=timezone.utc),
    ),
]
