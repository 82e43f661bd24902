"""
Centralized site configuration.
Edit this file to update the page title, tagline and footer displayed on the site.
"""

SITE_CONFIG = {
    # Header — big title and the line under it
    "title": "Free Car Identifier",
    "tagline": (
        "Upload a car photo for educational automotive identification "
        "and vehicle information"
    ),
    # Shown under the upload button
    "upload_hint": "PNG, JPG, JPEG or WEBP (MAX. 20MB)",
    # Footer — displayed at the bottom of the page
    "footer_note": (
        "Descriptions are generated by an AI model for educational purposes only "
        "and may contain mistakes."
    ),
}
