"""Статический контент по умолчанию.

Отдается, когда коллекция пуста или хранилище недоступно, и используется
для явного начального заполнения коллекций из админки.
"""
from cms.domains.content.schemas import (
    EnvironmentImpact, FAQItem, Feature, HowItWorksStep, InstagramReel, LegalContent,
    LegalSection, SafetyContent, SEOSettings, SiteImages, SiteSettings, Statistic, Testimonial,
)

DEFAULT_FAQ = [
    FAQItem(
        id="1", order=0, category="general",
        question="How does Snapgo work?",
        answer="Snapgo offers two ways to pool: No car? Match with verified co-riders, book a cab together "
               "via any app, and split the fare. Have a car? Create a ride for others to join. Either way, "
               "save up to 75% while reducing your carbon footprint.",
    ),
    FAQItem(
        id="2", order=1, category="safety",
        question="Is Snapgo safe to use?",
        answer="Yes! All users are verified through Aadhaar KYC powered by DigiLocker. We also offer a "
               "female-only option, real-time ride tracking, emergency SOS and a rating system.",
    ),
    FAQItem(
        id="3", order=2, category="pricing",
        question="How much can I save with Snapgo?",
        answer="You can save up to 75% on your cab fares. A ₹400 solo ride becomes just ₹100 when shared "
               "with 3 other riders.",
    ),
    FAQItem(
        id="4", order=3, category="safety",
        question="What is the female-only option?",
        answer="Women riders can match exclusively with other verified female riders for an extra layer "
               "of comfort and security.",
    ),
    FAQItem(
        id="5", order=4, category="general",
        question="Is cab pooling legal?",
        answer="Yes! Cab pooling uses commercial taxis that are already licensed for passenger transport. "
               "Snapgo helps riders heading the same way share the fare.",
    ),
]

DEFAULT_FEATURES = [
    Feature(id="1", order=0, icon="Wallet", title="Save Up to 75%",
            description="Share cab fares and save significant money on your daily commute"),
    Feature(id="2", order=1, icon="ShieldCheck", title="Aadhaar Verified",
            description="All users verified via Aadhaar KYC powered by DigiLocker"),
    Feature(id="3", order=2, icon="Users", title="Female-Only Option",
            description="Women can connect only with verified female riders for added safety"),
    Feature(id="4", order=3, icon="Clock", title="Real-time & Scheduled",
            description="Find rides instantly or plan ahead for your convenience"),
    Feature(id="5", order=4, icon="Leaf", title="Green Cab Pooling",
            description="4 people, 1 cab = 75% less pollution. We pool commercial cabs, not private cars"),
    Feature(id="6", order=5, icon="Shuffle", title="Pool Your Way",
            description="No car? Book a cab together. Have a car? Offer rides. Same savings, one green mission."),
]

DEFAULT_STEPS = [
    HowItWorksStep(id="1", step=1, order=1, icon="MapPin", title="Enter Your Destination",
                   description="Set your pickup and drop location in the app"),
    HowItWorksStep(id="2", step=2, order=2, icon="Search", title="Find Your Match",
                   description="Our algorithm finds people going to the same destination within 750m"),
    HowItWorksStep(id="3", step=3, order=3, icon="Users", title="Pool Together & Save",
                   description="Book a cab together or join a self-drive ride. Split costs and save up to 75%"),
]

DEFAULT_REELS = []

DEFAULT_STATS = [
    Statistic(id="1", order=0, label="App Downloads", value=10000, suffix="+", icon="Download"),
    Statistic(id="2", order=1, label="Peak Daily Rides", value=150, suffix="+", icon="Car"),
    Statistic(id="3", order=2, label="Cost Savings", value=75, suffix="%", icon="Wallet"),
    Statistic(id="4", order=3, label="Trees Equivalent", value=500, suffix="+", icon="TreePine"),
]

DEFAULT_TESTIMONIALS = [
    Testimonial(
        id="1", order=0, author="Priya S.", role="College Student", location="Sharda University",
        quote="Snapgo has saved me so much money! I used to spend Rs.400 for my daily commute, "
              "now I only pay Rs.100 by sharing with fellow students.",
    ),
    Testimonial(
        id="2", order=1, author="Rahul K.", role="IT Professional", location="Greater Noida",
        quote="As a working professional, Snapgo has made my daily travel both affordable and social.",
    ),
    Testimonial(
        id="3", order=2, author="Ananya M.", role="Graduate Student", location="Delhi NCR",
        quote="The female-only option makes me feel safe. I can now travel without worrying about security.",
    ),
]

DEFAULT_ENVIRONMENT = EnvironmentImpact(
    headline="Your Green Impact",
    subheadline="Track your contribution to a cleaner planet",
    default_rides=10,
    co2_per_ride=2.5,
    trees_equivalent=0.1,
    metrics_labels={
        "rides": "Pooled Rides",
        "co2_saved": "CO₂ Saved (kg)",
        "trees_equiv": "Trees Equivalent",
    },
)

DEFAULT_SETTINGS = SiteSettings(
    site={
        "name": "Snapgo",
        "legal_name": "Snapgo Service Private Limited",
        "tagline": "Pool Cabs, Save Money, Go Green",
        "description": "India's #1 Cab Pooling Platform. Pool a commercial cab with verified co-riders.",
        "url": "https://snapgo.co.in",
    },
    contact={
        "email": "info@snapgo.co.in",
        "phone": "+91 6398786105",
        "address": "Block 45, Sharda University, Knowledge Park 3, Greater Noida, Uttar Pradesh, India",
    },
    social={
        "facebook": "https://www.facebook.com/profile.php?id=61578285621863",
        "instagram": "https://www.instagram.com/snapgo.co.in/",
        "linkedin": "https://www.linkedin.com/company/snapgo-service-private-limited/",
    },
    founders=["Mohit Purohit", "Surya Purohit"],
)

DEFAULT_SEO = SEOSettings(
    site_name="Snapgo",
    site_tagline="Share Rides, Save Money, Travel Together",
    default_description="Snapgo is India's trusted ride-sharing platform. Join verified users, save up to 75% "
                        "on cab fares, and travel safely with KYC-verified co-riders.",
    default_keywords=[
        "snapgo", "ride sharing", "cab sharing", "carpool india", "save money", "verified rides", "safe travel",
    ],
    twitter_handle="@snapgo_app",
    robots_txt="User-agent: *\nAllow: /\nDisallow: /admin/\nDisallow: /api/\n\nSitemap: https://snapgo.in/sitemap.xml",
)

DEFAULT_IMAGES = SiteImages(
    logos={
        "white": "/images/logo/Snapgo Logo White.png",
        "blue": "/images/logo/Snapgo Logo Blue.png",
        "favicon": "/favicon.ico",
    },
    qr_codes={
        "android": "/images/qr code/playstore-qr.png",
        "ios": "/images/qr code/appstore-qr.png",
    },
    mockups={
        "home_screen": "/images/app mockups/1 - home screen.png",
        "trip_details": "/images/app mockups/2 - trip details.png",
        "trip_chat": "/images/app mockups/3 - trip chat.png",
        "in_app_calling": "/images/app mockups/4 - in app calling.png",
        "profile_verified": "/images/app mockups/5 - profile verified.png",
        "create_trip": "/images/app mockups/6 - create trip.png",
        "emergency_sos": "/images/app mockups/7 - emergency sos.png",
        "splash_screen": "/images/app mockups/Splash screen.png",
    },
    app_store_badges={
        "apple": "/images/badges/apple-store-badge.svg",
        "google": "/images/badges/google-play-badge.svg",
    },
    seo={"og_image": "/images/og-image.png"},
    hero={"app_mockup": "/images/app mockups/1 - home screen.png", "background": ""},
)

DEFAULT_SAFETY = SafetyContent(
    hero={
        "headline": "Your Safety is Our Priority",
        "subheadline": "Every feature is designed with your security in mind.",
        "points": [
            "100% KYC verification for all users",
            "One-tap SOS with instant location sharing",
            "Dedicated female-only ride option",
        ],
        "stats": [
            {"value": "100%", "label": "KYC Verified"},
            {"value": "<30s", "label": "SOS Response"},
            {"value": "24/7", "label": "Support"},
        ],
    },
    features=[
        {"id": "1", "order": 0, "icon": "ShieldCheck", "title": "Aadhaar KYC Verification",
         "description": "Every user must complete Aadhaar-based KYC verification.",
         "points": ["Real Identities", "Gender Verification", "Government Backed", "KYC Badge"]},
        {"id": "2", "order": 1, "icon": "UserCheck", "title": "Female Safety Features",
         "description": "Special features designed for women travelers.",
         "points": ["Female-Only Filter", "No Gender Manipulation", "Verified Profiles"]},
        {"id": "3", "order": 2, "icon": "AlertTriangle", "title": "Emergency SOS Feature",
         "description": "One tap to alert emergency contacts.",
         "points": ["Emergency contacts", "One-tap SOS", "Instant notification", "Live location"]},
    ],
    sos={
        "headline": "Emergency SOS Feature",
        "subheadline": "Your safety net in emergencies.",
        "steps": ["Add emergency contacts", "One-tap SOS", "Instant notification", "Live location shared"],
        "shares": [
            {"icon": "MapPin", "label": "Your live GPS location"},
            {"icon": "Users", "label": "Trip details & co-riders"},
            {"icon": "Clock", "label": "Timestamp of alert"},
        ],
    },
    trust={
        "headline": "Trusted & Certified",
        "subheadline": "Snapgo meets the highest standards of safety and security.",
        "certifications": [
            {"title": "DPIIT Recognized", "description": "Government certified startup"},
            {"title": "Startup India", "description": "Official initiative member"},
            {"title": "Data Protected", "description": "Industry-standard encryption"},
        ],
    },
    cta={
        "quote": "From day one, safety has been our top priority.",
        "badge": "100% KYC Verified Platform",
        "button_text": "Download Snapgo",
        "button_link": "/#download",
    },
)

_LEGAL_TITLES = {
    "terms": "Terms of Service",
    "privacy": "Privacy Policy",
    "refund": "Refund Policy",
}


def default_legal(legal_type: str) -> LegalContent:
    """Пустая юридическая страница с одним разделом-заглушкой"""
    return LegalContent(
        type=legal_type,
        title=_LEGAL_TITLES[legal_type],
        sections=[LegalSection(id="1", order=0, title="Overview", content="")],
    )
