from __future__ import annotations

# Tool descriptions used by FastMCP when registering tools. Keep short and clear.
TOOL_DESCRIPTIONS: dict[str, str] = {
    "list_transformations": "List catalog transformations, optionally filtered by category, search text, popular or premium flags.",
    "suggest_transformations": "Recommend transformations for an image, ranked by priority (1 = best).",
    "transform_image": "Run a vision-guided transformation (enhance, colorize, object_removal, style_transfer) and save the result.",
}


# High-level, concise server instructions for agents.
SERVER_INSTRUCTIONS: str = (
    "Photo Transform MCP Server - Agent Instructions.\n"
    "Role: This server transforms photos in two stages: a vision model analyzes the image and returns "
    "guidance, then a local pixel engine applies it. Tools: list_transformations, suggest_transformations, "
    "transform_image.\n\n"
    "Workflow (short):\n"
    "1) Optionally call suggest_transformations to see what fits the image.\n"
    "2) Call transform_image with a task: enhance | colorize | object_removal | style_transfer.\n"
    "3) For style_transfer pass a style (impressionist, expressionist, cubist, surrealist, pop_art, abstract, "
    "watercolor, oil_painting, sketch, anime, vintage, noir) and an intensity between 0 and 1.\n"
    "4) For object_removal pass a target description, or omit it to let the model pick a distracting object.\n\n"
    "Hard rules (must follow):\n"
    "- colorize only accepts black and white photos; colored inputs are rejected with 'already_colored'.\n"
    "- Analysis calls are rate limited; do not retry 'quota' errors in a tight loop.\n"
    "- A 'no_target' status means the image was returned unchanged.\n\n"
    "Outputs and failures (summary):\n"
    "- Successful calls return an ImageContent block plus a structured TransformToolStructured payload "
    "with file_path, status and the applied guidance.\n"
    "- Failures surface as MCP ToolErrors prefixed with a stable code (invalid_image, image_too_large, "
    "already_colored, target_not_found, network, quota, auth, timeout, unknown)."
)


# ---------------------------------------------------------------------------
# Analysis prompt templates (Jinja2). Keys requested here are the keys the
# guidance models decode; keep both in sync.
# ---------------------------------------------------------------------------

ENHANCE_PROMPT = """
Analyze this photo and recommend enhancement settings. Reply with one JSON object:
{
  "brightness": <number -100 to 100>,
  "contrast": <number -100 to 100>,
  "saturation": <number -100 to 100>,
  "sharpness": <number 0 to 200>,
  "noise_reduction": <number 0 to 100>,
  "color_balance": {"red": <-100 to 100>, "green": <-100 to 100>, "blue": <-100 to 100>},
  "highlights": <number -100 to 100>,
  "shadows": <number -100 to 100>,
  "clarity": <number 0 to 100>
}
Use 0 for anything that should stay as it is. Aim to fix exposure, improve colour and reduce noise.
"""

COLORIZE_PROMPT = """
This is a black and white photo. Work out realistic colours for it and reply with one JSON object:
{
  "scene_type": "portrait | landscape | indoor | street | other",
  "time_period": "approximate era of the photo",
  "dominant_objects": [
    {"object": "name", "suggested_color": "#RRGGBB", "confidence": <0 to 100>}
  ],
  "sky_color": "#RRGGBB",
  "skin_tone": "#RRGGBB",
  "vegetation_color": "#RRGGBB",
  "overall_tone": "warm | cool | neutral",
  "lighting_condition": "short description",
  "color_palette": ["#RRGGBB", "..."]
}
Order color_palette from the colour of the darkest regions to the colour of the brightest regions.
Give 3 to 8 colours that are historically plausible for the scene.
"""

OBJECT_REMOVAL_AUTO_PROMPT = """
Find objects in this photo that distract from the main subject and could be removed. Reply with one JSON object:
{
  "detected_objects": [
    {
      "object": "name",
      "confidence": <0 to 100>,
      "bounding_box": {"x": <0-1>, "y": <0-1>, "width": <0-1>, "height": <0-1>},
      "removal_priority": "high | medium | low",
      "removal_difficulty": "easy | medium | hard"
    }
  ],
  "recommended_removal": "name of the single best object to remove",
  "removal_strategy": "short description",
  "background_analysis": {
    "type": "solid | gradient | textured | complex",
    "dominant_color": "#RRGGBB",
    "pattern": "short description"
  }
}
Bounding boxes are relative to the image: x and y are the top-left corner as fractions of width and height.
"""

OBJECT_REMOVAL_TARGET_PROMPT = """
Locate "{{ target | trim }}" in this photo so it can be removed. Reply with one JSON object:
{
  "target_object": {
    "found": true | false,
    "object": "what you found",
    "confidence": <0 to 100>,
    "bounding_box": {"x": <0-1>, "y": <0-1>, "width": <0-1>, "height": <0-1>},
    "removal_difficulty": "easy | medium | hard"
  },
  "detected_objects": [
    {
      "object": "similar object",
      "confidence": <0 to 100>,
      "bounding_box": {"x": <0-1>, "y": <0-1>, "width": <0-1>, "height": <0-1>},
      "removal_priority": "high | medium | low",
      "removal_difficulty": "easy | medium | hard"
    }
  ],
  "background_analysis": {
    "type": "solid | gradient | textured | complex",
    "dominant_color": "#RRGGBB",
    "pattern": "short description"
  },
  "surrounding_context": "what is around the object"
}
If "{{ target | trim }}" is not visible set found to false and list similar objects instead.
Bounding boxes are relative to the image: x and y are the top-left corner as fractions of width and height.
"""

STYLE_PROMPT = """
Plan an artistic "{{ style.value }}" rendition of this photo ({{ style.description }}) at intensity {{ '%.1f' | format(intensity) }} of 1.0.
Reply with one JSON object:
{
  "image_analysis": {
    "dominant_colors": ["#RRGGBB"],
    "composition": "short description",
    "lighting": "short description",
    "texture": "short description",
    "mood": "short description"
  },
  "style_guidance": {
    "color_palette": {
      "primary_colors": ["#RRGGBB"],
      "accent_colors": ["#RRGGBB"],
      "color_temperature": "warm | cool | neutral",
      "saturation_adjustment": "increase | decrease | maintain",
      "brightness_adjustment": "increase | decrease | maintain"
    },
    "brush_effects": {
      "stroke_type": "smooth | rough | textured | geometric",
      "stroke_direction": "horizontal | vertical | diagonal | circular | random",
      "stroke_size": "fine | medium | bold",
      "edge_treatment": "soft | sharp | blended"
    },
    "artistic_elements": {
      "emphasis_areas": ["region"],
      "style_intensity": <0.0 to 1.0>,
      "texture_overlay": "light | medium | heavy",
      "contrast_adjustment": "increase | decrease | maintain"
    }
  },
  "transformation_steps": ["step"]
}
"""

SUGGESTION_PROMPT = """
Look at this photo and suggest the transformations that would improve it most. Reply with one JSON object:
{
  "suggestions": [
    {"transformation_id": "id", "confidence": <0.0 to 1.0>, "reason": "one sentence", "priority": <1 = best>}
  ]
}
Choose transformation_id values only from: {{ transformation_ids | join(", ") }}.
Suggest between 1 and {{ max_suggestions }} transformations.
"""


__all__ = [
    "TOOL_DESCRIPTIONS",
    "SERVER_INSTRUCTIONS",
    "ENHANCE_PROMPT",
    "COLORIZE_PROMPT",
    "OBJECT_REMOVAL_AUTO_PROMPT",
    "OBJECT_REMOVAL_TARGET_PROMPT",
    "STYLE_PROMPT",
    "SUGGESTION_PROMPT",
]
