"""Static transformation catalog.

Loaded once at import time and never mutated. Each entry carries the prompt
sent to the vision model when the transformation is requested by id.
"""

from __future__ import annotations

from ..schema import TransformationDescriptor
from .enums import Category


def _entry(
    id: str,
    name: str,
    description: str,
    category: Category,
    prompt: str,
    *,
    popular: bool = False,
    premium: bool = False,
) -> TransformationDescriptor:
    return TransformationDescriptor(
        id=id,
        name=name,
        description=description,
        category=category,
        prompt=prompt,
        is_popular=popular,
        is_premium=premium,
    )


TRANSFORMATIONS: tuple[TransformationDescriptor, ...] = (
    _entry("celebrity_photo", "Celebrity Photo", "Transform into your favorite celebrity", Category.FEATURED, "Transform this person to look like a celebrity while maintaining facial structure", popular=True),
    _entry("background_remover", "Background Remover", "Remove background instantly", Category.FEATURED, "Remove the background from this image, keep only the main subject", popular=True),
    _entry("face_swap", "Face Swap", "Swap faces between photos", Category.FEATURED, "Swap the faces in these two images naturally and realistically", popular=True),
    _entry("ai_enhance", "AI Enhance", "Enhance photo quality with AI", Category.FEATURED, "Enhance this image quality, improve sharpness, colors, and overall appearance", popular=True),
    _entry("style_transfer", "Style Transfer", "Apply artistic styles", Category.FEATURED, "Apply artistic style transfer to this image, make it look like a painting", popular=True),
    _entry("bg_beach", "Beach Paradise", "Place yourself on a tropical beach", Category.BACKGROUND, "Replace background with a beautiful tropical beach scene"),
    _entry("bg_city", "City Skyline", "Urban cityscape background", Category.BACKGROUND, "Replace background with a modern city skyline"),
    _entry("bg_forest", "Enchanted Forest", "Mystical forest setting", Category.BACKGROUND, "Replace background with an enchanted forest scene"),
    _entry("bg_space", "Space Adventure", "Cosmic space background", Category.BACKGROUND, "Replace background with a cosmic space scene with stars and galaxies"),
    _entry("bg_mountain", "Mountain Peak", "Majestic mountain landscape", Category.BACKGROUND, "Replace background with majestic mountain peaks"),
    _entry("bg_underwater", "Underwater World", "Deep ocean environment", Category.BACKGROUND, "Replace background with underwater ocean scene with fish and coral"),
    _entry("bg_desert", "Desert Oasis", "Sandy desert landscape", Category.BACKGROUND, "Replace background with a desert oasis scene"),
    _entry("bg_castle", "Medieval Castle", "Ancient castle setting", Category.BACKGROUND, "Replace background with a medieval castle scene"),
    _entry("bg_garden", "Flower Garden", "Beautiful flower garden", Category.BACKGROUND, "Replace background with a colorful flower garden"),
    _entry("bg_aurora", "Northern Lights", "Aurora borealis background", Category.BACKGROUND, "Replace background with northern lights aurora borealis"),
    _entry("bg_library", "Ancient Library", "Scholarly library setting", Category.BACKGROUND, "Replace background with an ancient library with books"),
    _entry("bg_cafe", "Cozy Cafe", "Warm coffee shop atmosphere", Category.BACKGROUND, "Replace background with a cozy coffee shop interior"),
    _entry("bg_studio", "Photo Studio", "Professional studio backdrop", Category.BACKGROUND, "Replace background with a professional photo studio backdrop"),
    _entry("bg_neon", "Neon City", "Cyberpunk neon lights", Category.BACKGROUND, "Replace background with cyberpunk neon city scene"),
    _entry("bg_vintage", "Vintage Room", "Retro vintage interior", Category.BACKGROUND, "Replace background with vintage retro room interior"),
    _entry("face_age_young", "Youth Filter", "Make yourself look younger", Category.FACE, "Make this person look younger, reduce wrinkles and age signs"),
    _entry("face_age_old", "Age Progression", "See yourself in the future", Category.FACE, "Age this person to show how they might look when older"),
    _entry("face_gender_swap", "Gender Swap", "Switch gender appearance", Category.FACE, "Transform this person to opposite gender while keeping identity"),
    _entry("face_smile", "Perfect Smile", "Add a natural smile", Category.FACE, "Add a natural, beautiful smile to this person's face"),
    _entry("face_makeup", "AI Makeup", "Apply professional makeup", Category.FACE, "Apply professional makeup to enhance this person's features"),
    _entry("face_beard", "Beard Generator", "Add different beard styles", Category.FACE, "Add a stylish beard to this person's face"),
    _entry("face_hair_color", "Hair Color Change", "Try different hair colors", Category.FACE, "Change the hair color of this person to a different attractive color"),
    _entry("face_glasses", "Virtual Glasses", "Try on different glasses", Category.FACE, "Add stylish glasses to this person's face"),
    _entry("face_expression", "Expression Change", "Modify facial expressions", Category.FACE, "Change the facial expression to be more expressive and engaging"),
    _entry("face_skin_smooth", "Skin Smoothing", "Perfect skin texture", Category.FACE, "Smooth and perfect the skin texture while keeping it natural"),
    _entry("style_anime", "Anime Style", "Transform into anime character", Category.STYLE, "Transform this image into anime/manga art style", popular=True),
    _entry("style_cartoon", "Cartoon Style", "Cartoon character transformation", Category.STYLE, "Transform this image into cartoon style illustration"),
    _entry("style_oil_painting", "Oil Painting", "Classic oil painting style", Category.STYLE, "Transform this image into an oil painting masterpiece"),
    _entry("style_watercolor", "Watercolor", "Soft watercolor painting", Category.STYLE, "Transform this image into watercolor painting style"),
    _entry("style_pencil", "Pencil Sketch", "Hand-drawn pencil art", Category.STYLE, "Transform this image into detailed pencil sketch"),
    _entry("style_pop_art", "Pop Art", "Vibrant pop art style", Category.STYLE, "Transform this image into pop art style with vibrant colors"),
    _entry("style_cyberpunk", "Cyberpunk", "Futuristic cyberpunk aesthetic", Category.STYLE, "Transform this image into cyberpunk futuristic style"),
    _entry("style_gothic", "Gothic Art", "Dark gothic style", Category.STYLE, "Transform this image into gothic art style"),
    _entry("style_impressionist", "Impressionist", "Impressionist painting style", Category.STYLE, "Transform this image into impressionist painting style"),
    _entry("style_pixel_art", "Pixel Art", "Retro pixel art style", Category.STYLE, "Transform this image into pixel art style"),
    _entry("enhance_hdr", "HDR Enhancement", "High dynamic range processing", Category.ENHANCE, "Apply HDR enhancement to improve dynamic range and colors"),
    _entry("enhance_sharpen", "Smart Sharpen", "Intelligent sharpening", Category.ENHANCE, "Apply smart sharpening to enhance image details"),
    _entry("enhance_denoise", "Noise Reduction", "Remove image noise", Category.ENHANCE, "Remove noise and grain from this image while preserving details"),
    _entry("enhance_upscale", "AI Upscale", "Increase resolution with AI", Category.ENHANCE, "Upscale this image to higher resolution using AI enhancement", premium=True),
    _entry("enhance_colorize", "AI Colorize", "Add color to black & white", Category.ENHANCE, "Colorize this black and white image with realistic colors"),
    _entry("enhance_restore", "Photo Restoration", "Restore old damaged photos", Category.ENHANCE, "Restore this old or damaged photo, fix scratches and improve quality", premium=True),
    _entry("enhance_lighting", "Lighting Fix", "Improve lighting conditions", Category.ENHANCE, "Improve the lighting and exposure of this image"),
    _entry("enhance_contrast", "Smart Contrast", "Optimize contrast levels", Category.ENHANCE, "Optimize contrast and brightness for better visual impact"),
    _entry("enhance_saturation", "Color Boost", "Enhance color vibrancy", Category.ENHANCE, "Boost color saturation and vibrancy naturally"),
    _entry("enhance_clarity", "Clarity Boost", "Improve overall clarity", Category.ENHANCE, "Improve overall image clarity and definition"),
    _entry("enhance_object_removal", "Object Removal", "Remove unwanted objects", Category.ENHANCE, "Remove the unwanted object and fill the area to match its surroundings"),
    _entry("creative_double_exposure", "Double Exposure", "Artistic double exposure effect", Category.CREATIVE, "Create artistic double exposure effect combining two images"),
    _entry("creative_mirror", "Mirror Effect", "Symmetrical mirror reflection", Category.CREATIVE, "Create mirror effect with symmetrical reflection"),
    _entry("creative_kaleidoscope", "Kaleidoscope", "Kaleidoscope pattern effect", Category.CREATIVE, "Transform image into kaleidoscope pattern"),
    _entry("creative_mosaic", "Photo Mosaic", "Create mosaic from photos", Category.CREATIVE, "Create photo mosaic effect using multiple small images"),
    _entry("creative_collage", "AI Collage", "Intelligent photo collage", Category.CREATIVE, "Create artistic collage combining multiple photos"),
    _entry("creative_surreal", "Surreal Art", "Surrealistic transformation", Category.CREATIVE, "Transform into surreal artistic composition"),
    _entry("creative_fractal", "Fractal Art", "Mathematical fractal patterns", Category.CREATIVE, "Apply fractal art patterns to the image"),
    _entry("creative_glitch", "Glitch Effect", "Digital glitch aesthetic", Category.CREATIVE, "Apply digital glitch effect for modern aesthetic"),
    _entry("creative_hologram", "Hologram Effect", "Futuristic hologram look", Category.CREATIVE, "Transform into futuristic hologram effect"),
    _entry("creative_neon", "Neon Glow", "Vibrant neon lighting", Category.CREATIVE, "Add vibrant neon glow effects to the image"),
    _entry("pro_headshot", "Professional Headshot", "Corporate headshot style", Category.PROFESSIONAL, "Transform into professional corporate headshot"),
    _entry("pro_linkedin", "LinkedIn Profile", "Perfect LinkedIn photo", Category.PROFESSIONAL, "Optimize for professional LinkedIn profile photo"),
    _entry("pro_passport", "Passport Photo", "Official document photo", Category.PROFESSIONAL, "Format as official passport/ID photo with proper background"),
    _entry("pro_resume", "Resume Photo", "Professional resume picture", Category.PROFESSIONAL, "Create professional resume photo with clean background"),
    _entry("pro_business", "Business Portrait", "Executive business portrait", Category.PROFESSIONAL, "Transform into executive business portrait"),
    _entry("pro_academic", "Academic Photo", "Scholarly professional look", Category.PROFESSIONAL, "Create academic professional photo for scholarly purposes"),
    _entry("pro_medical", "Medical Professional", "Healthcare professional look", Category.PROFESSIONAL, "Transform into medical professional appearance"),
    _entry("pro_lawyer", "Legal Professional", "Attorney professional style", Category.PROFESSIONAL, "Create legal professional appearance for attorney profile"),
    _entry("pro_teacher", "Educator Style", "Professional educator look", Category.PROFESSIONAL, "Transform into professional educator appearance"),
    _entry("pro_consultant", "Consultant Style", "Professional consultant look", Category.PROFESSIONAL, "Create professional consultant appearance"),
    _entry("vintage_1920s", "1920s Glamour", "Roaring twenties style", Category.VINTAGE, "Transform into 1920s glamour style with period appropriate look"),
    _entry("vintage_1950s", "1950s Classic", "Mid-century classic look", Category.VINTAGE, "Transform into 1950s classic style"),
    _entry("vintage_1960s", "1960s Mod", "Swinging sixties style", Category.VINTAGE, "Transform into 1960s mod style"),
    _entry("vintage_1970s", "1970s Disco", "Groovy disco era", Category.VINTAGE, "Transform into 1970s disco era style"),
    _entry("vintage_1980s", "1980s Retro", "Neon eighties vibe", Category.VINTAGE, "Transform into 1980s retro style with neon colors"),
    _entry("vintage_sepia", "Sepia Tone", "Classic sepia photography", Category.VINTAGE, "Apply classic sepia tone effect"),
    _entry("vintage_film", "Film Photography", "Analog film camera look", Category.VINTAGE, "Apply vintage film photography aesthetic"),
    _entry("vintage_polaroid", "Polaroid Style", "Instant camera aesthetic", Category.VINTAGE, "Transform into polaroid instant photo style"),
    _entry("vintage_daguerreotype", "Daguerreotype", "Early photography style", Category.VINTAGE, "Transform into daguerreotype early photography style"),
    _entry("vintage_tintype", "Tintype Photo", "Civil war era photography", Category.VINTAGE, "Transform into tintype civil war era photography"),
)

_BY_ID: dict[str, TransformationDescriptor] = {t.id: t for t in TRANSFORMATIONS}
if len(_BY_ID) != len(TRANSFORMATIONS):  # pragma: no cover - guards catalog edits
    raise RuntimeError("Duplicate transformation ids in catalog")


def get_transformation(transformation_id: str) -> TransformationDescriptor | None:
    return _BY_ID.get(transformation_id)


def transformations_by_category(category: Category) -> list[TransformationDescriptor]:
    return [t for t in TRANSFORMATIONS if t.category == category]


def search_transformations(query: str) -> list[TransformationDescriptor]:
    """Case-insensitive substring search over names and descriptions."""
    needle = query.strip().lower()
    if not needle:
        return []
    return [t for t in TRANSFORMATIONS if needle in t.name.lower() or needle in t.description.lower()]


def popular_transformations() -> list[TransformationDescriptor]:
    return [t for t in TRANSFORMATIONS if t.is_popular]


def premium_transformations() -> list[TransformationDescriptor]:
    return [t for t in TRANSFORMATIONS if t.is_premium]


__all__ = [
    "TRANSFORMATIONS",
    "get_transformation",
    "transformations_by_category",
    "search_transformations",
    "popular_transformations",
    "premium_transformations",
]
