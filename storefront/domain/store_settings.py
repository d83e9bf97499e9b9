# storefront/domain/store_settings.py
"""
Typed views over the key/value ``settings`` table.

Each field name is a settings key; the field's type and default define how a
stored string is read back. Missing or blank values keep the default.
"""
from decimal import Decimal

from pydantic import BaseModel


class StoreSettings(BaseModel):
    store_name: str = "iTag Store"
    contact_email: str = "support@itag.com"
    support_phone: str = "+1 (555) 123-4567"
    currency: str = "USD"
    office_address: str = "San Francisco, CA"
    free_shipping_threshold: Decimal = Decimal("50.00")
    shipping_flat_rate: Decimal = Decimal("9.99")


class ContentSettings(BaseModel):
    # hero
    hero_badge_text: str = "New: iTag Ultra now available"
    hero_title_line1: str = "Never Lose"
    hero_title_line2: str = "What Matters"
    hero_description: str = (
        "Premium tracking devices that seamlessly connect with your iPhone. "
        "Find your keys, wallet, luggage, and more with precision accuracy."
    )
    hero_stat1_value: str = "1M+"
    hero_stat1_label: str = "Items Found"
    hero_stat2_value: str = "4.9"
    hero_stat2_label: str = "Rating"
    hero_stat3_value: str = "500k+"
    hero_stat3_label: str = "Happy Users"
    # features
    features_title: str = "Why Choose iTag?"
    features_subtitle: str = "Built with cutting-edge technology and designed for your peace of mind."
    feature1_title: str = "Precision Location"
    feature1_description: str = "Find your items with pinpoint accuracy using our advanced tracking technology."
    feature2_title: str = "Ultra-Fast Connection"
    feature2_description: str = "Instant pairing with your iPhone. Set up in seconds, track for years."
    feature3_title: str = "Privacy First"
    feature3_description: str = "End-to-end encrypted. Only you can see the location of your items."
    # featured products
    featured_products_title: str = "Featured Products"
    featured_products_subtitle: str = "Our most popular tracking devices"
    # cta
    cta_title_line1: str = "Ready to Never Lose"
    cta_title_line2: str = "Your Essentials Again?"
    cta_description: str = "Join over 500,000 happy customers who trust iTag to keep their valuables safe."
    cta_button_text: str = "Start Shopping"
    # about
    about_hero_title_line1: str = "Our Mission is to"
    about_hero_title_line2: str = "Bring Peace of Mind"
    about_hero_description: str = (
        "We believe no one should have to worry about losing their valuables. "
        "That's why we created iTag, the most reliable way to keep track of what matters most."
    )
    about_stat1_value: str = "500K+"
    about_stat1_label: str = "Happy Customers"
    about_stat2_value: str = "1M+"
    about_stat2_label: str = "Items Found"
    about_stat3_value: str = "99.9%"
    about_stat3_label: str = "Success Rate"
    about_stat4_value: str = "4.9"
    about_stat4_label: str = "App Rating"
    about_story_title: str = "Our Story"
    about_story_paragraph1: str = (
        "iTag was born from a simple frustration: we've all been there, frantically "
        "searching for keys when running late or worrying about lost luggage while traveling."
    )
    about_story_paragraph2: str = (
        "Founded in 2020, our team of engineers and designers set out to create the most "
        "reliable, user-friendly tracking device on the market."
    )
    about_story_paragraph3: str = (
        "We're constantly innovating with location technology while maintaining our "
        "commitment to privacy and security."
    )
    about_story_box_title: str = "Never Lose Track"
    about_story_box_subtitle: str = "Of what matters most to you"
    about_values_title: str = "Our Values"
    about_values_subtitle: str = "The principles that guide everything we do"
    about_value1_title: str = "Privacy First"
    about_value1_description: str = "Your location data is end-to-end encrypted. Only you have access."
    about_value2_title: str = "Innovation"
    about_value2_description: str = "Cutting-edge technology that pushes the boundaries of what's possible."
    about_value3_title: str = "Customer Focus"
    about_value3_description: str = "Every product decision starts with our customers' needs."
    about_contact_title: str = "Get in Touch"
    about_contact_subtitle: str = "Have questions? We'd love to hear from you."


SETTINGS_SCHEMAS = (StoreSettings, ContentSettings)

KNOWN_KEYS = frozenset(
    name for schema in SETTINGS_SCHEMAS for name in schema.model_fields
)
