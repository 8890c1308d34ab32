"""
LLM prompt templates for the storefront voice assistant.

All prompts are defined here so prompt engineering can be done independently
of interpreter control flow. Placeholders use str.format syntax; literal
braces in JSON examples are doubled.
"""

# ============================================================================
# Primary intent classification
# ============================================================================

PRIMARY_INTENT_PROMPT = """You are the voice command router for a fitness apparel and equipment store.
Classify the spoken command into EXACTLY one category.

Categories:
- navigation: go back, go to the previous page, go home, main page
- order_completion: place, complete, finish or submit the order, pay now, buy now
- user_info: the user states personal or payment details (name, email, address, phone, card number, expiry date, CVV, name on card)
- cart: open the cart, view basket, go to checkout or payment
- product_action: act on the product currently shown (choose a size, change quantity, add to cart)
- product_navigation: open the page of one specific named product
- remove_filter: remove or drop one or more specific filters (a color, size, brand, price limit)
- category_navigation: browse a category such as gym, yoga or running gear, optionally with filters
- apply_filter: narrow the current listing by color, size, material, gender, brand, type or price
- clear_filters: clear, reset or remove all filters
- general_command: anything else

Command: "{utterance}"

Return ONLY the category name, nothing else."""

# ============================================================================
# Fallback function selection
# ============================================================================

GENERAL_COMMAND_PROMPT = """You are a shopping assistant that helps users navigate an e-commerce website.
Analyze the following voice command and determine which function to call.

User command: "{utterance}"

Available functions:
{functions}

Return ONLY the function name that best matches the user's intent, or "unknown" if no function matches.
IMPORTANT: If the user is asking to clear, reset, or remove filters in ANY way, you MUST return "clearFilters".
Do not include any other text in your response."""

# ============================================================================
# Navigation
# ============================================================================

NAVIGATION_PROMPT = """You are a shopping assistant that moves the user around the website.
Command: "{utterance}"

Decide whether the user wants to go back to the previous page or go to the home page.
Return a JSON object: {{"action": "back"}} or {{"action": "home"}}.
If neither applies, return {{"action": "none"}}."""

CATEGORY_PROMPT = """You are a shopping assistant for a fitness store with three categories:
- gym: gym clothes, weights, training equipment
- yoga: yoga mats, blocks, straps, yoga clothing
- running: running shoes, jogging gear, running apparel

Command: "{utterance}"

Return ONLY one word: gym, yoga, running, or none."""

CART_PROMPT = """You are a shopping assistant.
Command: "{utterance}"

Decide whether the user wants to view the shopping cart or proceed to checkout/payment.
Return a JSON object: {{"action": "goToCart"}} or {{"action": "checkout"}}.
If neither applies, return {{"action": "none"}}."""

# ============================================================================
# Product page
# ============================================================================

PRODUCT_ACTION_PROMPT = """You are a shopping assistant on the product page for "{product_name}".
Available sizes: {sizes}

Command: "{utterance}"

Return a JSON object describing ONE action:
- choose a size: {{"action": "size", "size": "<one of the available sizes>"}}
- change quantity: {{"action": "quantity", "quantity": <whole number>}}
- add the product to the cart: {{"action": "addToCart"}}
If the command is none of these, return {{"action": "none"}}."""

PRODUCT_NAVIGATION_PROMPT = """You are a shopping assistant. The store sells these products:
{product_names}

Command: "{utterance}"

Which product does the user want to open? Return a JSON object:
{{"product": "<product name as spoken or as listed>"}}
If no product is referenced, return {{"product": null}}."""

# ============================================================================
# Filters
# ============================================================================

FILTER_PROMPT = """You are a shopping assistant that helps users filter products.
Analyze this voice command and determine the filters to apply.
Command: "{utterance}"

Available filters:
- Colors: {colors}
- Sizes: {sizes}
- Materials: {materials}
- Genders: {genders}
- Brands: {brands}
- Categories: {subCategories}
- Price Range: Any range between {price_floor:g}-{price_ceiling:g} dollars

Return a JSON object with ONLY the filters mentioned in the command.
IMPORTANT: Use EXACTLY these keys in your response:
{{
  "colors": [],
  "sizes": [],
  "materials": [],
  "genders": [],
  "brands": [],
  "subCategories": [],
  "price": [min, max]
}}

Only include filters that were explicitly mentioned. Use empty arrays for filter types not mentioned.
For price, use the format [min, max] with values between {price_floor:g}-{price_ceiling:g}.
If no specific filters were detected, return an empty object {{}}.

Make sure all filter values exactly match the available options provided above.
Return all values in lowercase for consistency."""

FILTER_REMOVAL_PROMPT = """You are a shopping assistant that helps users remove product filters.
Command: "{utterance}"

Currently applied filters:
{applied}

Return a JSON object listing ONLY the filter values the user wants removed:
{{
  "colors": [],
  "sizes": [],
  "materials": [],
  "genders": [],
  "brands": [],
  "subCategories": [],
  "removePrice": false
}}
Set "removePrice" to true if the user wants the price limit removed.
If nothing should be removed, return an empty object {{}}."""

# ============================================================================
# User info capture
# ============================================================================

USER_INFO_PROMPT = """You are a checkout assistant that captures customer details from speech.
Command: "{utterance}"

Extract ONLY the details the user actually stated. Return a JSON object using these keys:
{{
  "name": "full name",
  "email": "email address (convert spoken 'at' and 'dot')",
  "address": "shipping address",
  "phone": "phone number digits",
  "card_name": "name on the card",
  "card_number": "card number digits",
  "expiry_date": "MM/YY",
  "cvv": "security code digits"
}}
Omit every key the user did not mention. If nothing was stated, return {{}}."""
