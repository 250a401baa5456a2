"""Field extractors, one per knowledge field group."""
from .about import about_extractor
from .branding import branding_extractor
from .contact import contact_extractor
from .extended import extended_extractor
from .founding import founding_extractor
from .market import market_extractor
from .offerings import offerings_extractor
from .people import people_extractor
from .social import social_extractor
from .structured_data import structured_data_parser
from .testimonials import testimonial_extractor

__all__ = [
    'about_extractor', 'branding_extractor', 'contact_extractor', 'extended_extractor',
    'founding_extractor', 'market_extractor', 'offerings_extractor', 'people_extractor',
    'social_extractor', 'structured_data_parser', 'testimonial_extractor',
]
