"""
Static vocabulary tables used by the product-name classifier and scorer.

The tables are immutable tuples held by a frozen dataclass. Callers that want
to tune extraction (tests, env overrides) build a new instance with
``ExtractionVocabulary.extended`` instead of mutating module state.
"""

from dataclasses import dataclass, replace
from typing import Iterable, Tuple


# US state / territory codes used for address detection
REGION_CODES: Tuple[str, ...] = (
    'AL', 'AK', 'AZ', 'AR', 'CA', 'CO', 'CT', 'DE', 'FL', 'GA',
    'HI', 'ID', 'IL', 'IN', 'IA', 'KS', 'KY', 'LA', 'ME', 'MD',
    'MA', 'MI', 'MN', 'MS', 'MO', 'MT', 'NE', 'NV', 'NH', 'NJ',
    'NM', 'NY', 'NC', 'ND', 'OH', 'OK', 'OR', 'PA', 'RI', 'SC',
    'SD', 'TN', 'TX', 'UT', 'VT', 'VA', 'WA', 'WV', 'WI', 'WY',
)

# Material / category / size words that show up in product titles
PRODUCT_INDICATORS: Tuple[str, ...] = (
    'jacket', 'coat', 'blender', 'set', 'pack', 'wireless', 'leather', 'cotton',
    'kitchen', 'mixer', 'headphones', 'speaker', 'tablet', 'laptop', 'camera',
    'shoes', 'boots', 'sneakers', 'dress', 'shirt', 'pants', 'jeans',
    'watch', 'ring', 'necklace', 'bracelet', 'earbuds', 'charger', 'cable',
    'bag', 'backpack', 'wallet', 'purse', 'case', 'cover', 'stand', 'holder',
    'tool', 'drill', 'saw', 'vacuum', 'cleaner', 'iron', 'toaster', 'oven',
    'pro', 'max', 'plus', 'ultra', 'mini', 'lite', 'edition', 'series',
    'womens', 'mens', 'women', 'men', 'kids', 'boys', 'girls',
    'front', 'back', 'zip', 'lined', 'fully', 'new', 'black', 'white', 'blue', 'red',
)

# Brands commonly flipped by resellers (lowercase, substring match)
KNOWN_BRANDS: Tuple[str, ...] = (
    'cole haan', 'nike', 'adidas', 'apple', 'samsung', 'sony', 'lg', 'kitchenaid',
    'ninja', 'instant pot', 'cuisinart', 'dyson', 'shark', 'roomba', 'irobot',
    'north face', 'patagonia', 'columbia', 'levi', 'calvin klein', 'ralph lauren',
    'michael kors', 'coach', 'kate spade', 'gucci', 'prada', 'louis vuitton',
    'bose', 'jbl', 'beats', 'anker', 'logitech', 'razer', 'hp', 'dell', 'lenovo',
    'amazon basics', 'mainstays', 'better homes',
)

# Storefront navigation / checkout chrome (lowercase, substring match)
UI_EXCLUSIONS: Tuple[str, ...] = (
    'your orders', 'your account', 'buy again', 'cart', 'checkout',
    'subtotal', 'shipping', 'tax', 'total', 'payment',
    'track package', 'hello', 'sign in', 'home', 'menu', 'search',
    'amazon', 'target', 'walmart', 'prime', 'delivery', 'return',
    'customer service', 'my account', 'sign out', 'help', 'view order',
)


def _merge(base: Tuple[str, ...], extra: Iterable[str]) -> Tuple[str, ...]:
    """Append lowercased extra terms that are not already present."""
    merged = list(base)
    for term in extra:
        term = term.strip().lower()
        if term and term not in merged:
            merged.append(term)
    return tuple(merged)


@dataclass(frozen=True)
class ExtractionVocabulary:
    """Vocabulary bundle injected into the classifier and scorer."""
    region_codes: Tuple[str, ...] = REGION_CODES
    product_indicators: Tuple[str, ...] = PRODUCT_INDICATORS
    brands: Tuple[str, ...] = KNOWN_BRANDS
    ui_exclusions: Tuple[str, ...] = UI_EXCLUSIONS

    def extended(
        self,
        brands: Iterable[str] = (),
        product_indicators: Iterable[str] = (),
        ui_exclusions: Iterable[str] = (),
    ) -> 'ExtractionVocabulary':
        """
        Return a copy with extra terms appended to each table.

        Args:
            brands: Additional brand names
            product_indicators: Additional product-indicator words
            ui_exclusions: Additional storefront chrome strings

        Returns:
            New ExtractionVocabulary; self is left untouched
        """
        return replace(
            self,
            brands=_merge(self.brands, brands),
            product_indicators=_merge(self.product_indicators, product_indicators),
            ui_exclusions=_merge(self.ui_exclusions, ui_exclusions),
        )


DEFAULT_VOCABULARY = ExtractionVocabulary()


def default_vocabulary() -> ExtractionVocabulary:
    """Built-in vocabulary with no overrides."""
    return DEFAULT_VOCABULARY


def vocabulary_from_settings(settings) -> ExtractionVocabulary:
    """Build the vocabulary with EXTRA_* overrides from application settings."""
    return DEFAULT_VOCABULARY.extended(
        brands=getattr(settings, 'EXTRA_BRANDS', ()),
        product_indicators=getattr(settings, 'EXTRA_PRODUCT_INDICATORS', ()),
        ui_exclusions=getattr(settings, 'EXTRA_UI_EXCLUSIONS', ()),
    )
