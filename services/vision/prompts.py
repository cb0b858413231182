"""
Vision prompt table.

The keyword sent as the SMS body picks the question asked about the image.
Add/edit prompts below as needed.
"""

from typing import Optional

DEFAULT_PROMPT_KEY = "default"

MEDIA_PROMPTS: dict[str, str] = {
    "dog": (
        "Is there a dog in this image? If yes, determine the breed. Give your response "
        "in JSON where the is_dog variable declares whether a dog is present and the "
        "breed variable is your determination of breed."
    ),
    "screenshot": (
        "Is this image a screenshot? If yes, is there a warning message? Respond with a "
        "yes or no regarding if there are warning messages. Summarize the messages in "
        "less than 15 words."
    ),
    "category": (
        "Can this image be categorized as a photograph, a cartoon, a drawing, or a "
        "screenshot? Respond with a JSON object with category and description "
        "properties, where description is a concise description of the image."
    ),
    "text": "Is there any text in this image? If yes, what are the first few words.",
    "insurance": (
        "Does this image show damage to a vehicle? If yes, where is the damage and what "
        "type of vehicle?"
    ),
    "retail": "Are the clothing items in this image Mens or Womens? What type of clothing is it?",
    "recommend": "Please recommend some products that go with the product in this image.",
    "tool": "What type of tool should I use for this screw or bolt?",
    "repair": (
        "Is there any appliance in this image and if yes, what type of appliance is in "
        "the image? Is there any damage to the appliance?"
    ),
    "people": "Are there people in this image? If yes how many?",
    "ingredients": "Please identify the ingredients in this meal.",
    "returns": (
        "What type of product is in the image? Does there appear to be any damage to "
        "the product in the image? Give a concise response."
    ),
    DEFAULT_PROMPT_KEY: "Write a caption for this image that is less than 15 words.",
}


def select_prompt(body: Optional[str]) -> str:
    """Prompt for a message body keyword (trimmed, case-insensitive)."""
    keyword = (body or "").strip().lower()
    return MEDIA_PROMPTS.get(keyword, MEDIA_PROMPTS[DEFAULT_PROMPT_KEY])
