"""
AI advisory service (Gemini).

Three request/response calls, each caught once at the call site:
- analyze_room: photos -> room estimate (falls back to a default room)
- chat: message + current design -> reply text and an optional design patch
- generate_build_guide: design -> cut list, tools and steps (None on failure)

Nothing is retried and nothing is streamed.
"""

import base64
import json
import logging
import time
from typing import List, Dict, Any, Optional, Tuple

from google import genai
from google.genai import types
from pydantic import BaseModel

from .config import Settings, load_settings
from .project import apply_patch, TV_UPPER_LAYOUT
from .schema import (
    DeskConfiguration, RoomEstimate, BuildGuide, ChatMessage, FloorType,
)

logger = logging.getLogger(__name__)

FALLBACK_ROOM = RoomEstimate(
    width=120, height=96, wall_color='#f3f4f6', floor_type=FloorType.WOOD, floor_color='#8d6e63'
)

UPDATED_REPLY = "I've updated the design for you. How does that look?"
EMPTY_REPLY = "I didn't catch that. Could you rephrase?"
ERROR_REPLY = "Sorry, I encountered an error processing your request."
CONNECTION_REPLY = "Sorry, I had trouble connecting. Please try again."
GREETING = ("I can help you design your built-in unit! Upload a photo of your wall, "
            "or tell me about your TV and storage needs.")


class AdvisorNotConfigured(RuntimeError):
    """No API key available for the AI service."""


class ChatReply(BaseModel):
    text: str
    patch: Optional[Dict[str, Any]] = None
    config: Optional[DeskConfiguration] = None


# ---------------------------------------------------------------------------
# Prompts and schemas
# ---------------------------------------------------------------------------

ROOM_PROMPT = """
Analyze these room photos for a built-in desk project.
Estimate the dimensions of the main wall shown.
1. Width of the available wall space (in inches).
2. Ceiling height (in inches, typically 96 or 108).
3. Pick the dominant Wall Color (hex code).
4. Detect floor type (wood, carpet, concrete).
5. Pick the dominant Floor Color (hex code).

Output JSON only.
"""

ROOM_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        'width': types.Schema(type=types.Type.NUMBER),
        'height': types.Schema(type=types.Type.NUMBER),
        'wallColor': types.Schema(type=types.Type.STRING),
        'floorType': types.Schema(type=types.Type.STRING, enum=[f.value for f in FloorType]),
        'floorColor': types.Schema(type=types.Type.STRING),
    },
)

BUILD_GUIDE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        'cutList': types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    'partName': types.Schema(type=types.Type.STRING),
                    'length': types.Schema(type=types.Type.NUMBER),
                    'width': types.Schema(type=types.Type.NUMBER),
                    'thickness': types.Schema(type=types.Type.NUMBER),
                    'quantity': types.Schema(type=types.Type.NUMBER),
                    'material': types.Schema(type=types.Type.STRING),
                },
            ),
        ),
        'toolsRequired': types.Schema(type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING)),
        'steps': types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    'title': types.Schema(type=types.Type.STRING),
                    'description': types.Schema(type=types.Type.STRING),
                },
            ),
        ),
    },
)

UPDATE_DESIGN_TOOL = types.FunctionDeclaration(
    name='updateDesign',
    description=('Update the design of the built-in desk unit. Can change dimensions, layout, '
                 'material, or added equipment.'),
    parameters=types.Schema(
        type=types.Type.OBJECT,
        properties={
            'deskDepth': types.Schema(type=types.Type.NUMBER, description='Depth of the desk surface in inches.'),
            'baseLayout': types.Schema(
                type=types.Type.ARRAY,
                items=types.Schema(type=types.Type.STRING, enum=['drawers', 'cabinet', 'cpu_holder', 'empty']),
                description='Layout of base units from left to right. "empty" is knee space.',
            ),
            'hasUppers': types.Schema(type=types.Type.BOOLEAN, description='Whether to include upper cabinets.'),
            'tvSize': types.Schema(type=types.Type.NUMBER,
                                   description='Size of TV in inches (diagonal). Set 0 to remove.'),
            'monitorCount': types.Schema(type=types.Type.NUMBER,
                                         description='Number of computer monitors (0, 1, or 2).'),
            'material': types.Schema(
                type=types.Type.STRING,
                enum=['Birch Plywood', 'Walnut Plywood', 'Solid Oak', 'Painted MDF'],
            ),
        },
    ),
)


def build_guide_prompt(config: DeskConfiguration) -> str:
    uppers = f"Yes, layout: {' - '.join(t.value for t in config.upper_layout)}" if config.has_uppers else "No"
    tv = f"{config.tv_size:g} inch TV" if config.tv_size > 0 else "None"
    return f"""
I am building a custom built-in desk/cabinet unit.
Specifications:
- Width: {config.room.width:g}"
- Material: {config.material.value}
- Base Layout: {' - '.join(t.value for t in config.base_layout)}
- Upper Cabinets: {uppers}
- TV Integration: {tv}

Act as a master cabinet maker.
Provide a detailed build plan.
1. A simplified cut list (focus on carcass parts: sides, bottoms, tops, shelves).
   Provide length, width, and thickness for each part in inches.
2. Tools required (e.g., Kreg Jig, Table Saw).
3. Step-by-step assembly instructions for building the carcasses, installing drawer slides, and scribing the countertop to the wall.

Output STRICT JSON.
"""


def chat_system_instruction(config: DeskConfiguration) -> str:
    # Photos are attached separately, keep the config snapshot small
    snapshot = config.model_dump_json(by_alias=True, exclude={'images'})
    return f"""
You are an expert cabinet maker and interior designer assisting a user in designing a built-in office desk.
Current Design Config: {snapshot}.

User Goals: They want a custom built-in look.

Capabilities:
- Call 'updateDesign' to change the model.
- If user asks for "drawers on the left", set baseLayout to start with 'drawers'.
- If user mentions a TV, enable uppers and set tvSize (usually 40-65 inches).
- If user mentions gaming or work, suggest dual monitors (monitorCount: 2).
- Analyze uploaded images for style (Modern vs Traditional).

Be enthusiastic about DIY!
"""


def decode_image(data_url: str) -> Tuple[bytes, str]:
    """'data:image/png;base64,AAAA' -> (bytes, 'image/png'). Bare base64 is taken as JPEG."""
    mime_type = 'image/jpeg'
    payload = data_url
    if ',' in data_url:
        header, payload = data_url.split(',', 1)
        if header.startswith('data:') and ';' in header:
            mime_type = header[5:header.index(';')]
    return base64.b64decode(payload), mime_type


def _image_part(data_url: str) -> types.Part:
    data, mime_type = decode_image(data_url)
    return types.Part.from_bytes(data=data, mime_type=mime_type)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class DesignAdvisor:
    def __init__(self, settings: Optional[Settings] = None, client: Any = None):
        self.settings = settings or load_settings()
        if client is None:
            if not self.settings.api_key:
                raise AdvisorNotConfigured("Set GEMINI_API_KEY to use the design assistant")
            client = genai.Client(api_key=self.settings.api_key)
        self.client = client
        self.model = self.settings.model

    def analyze_room(self, images: List[str]) -> RoomEstimate:
        try:
            contents: List[Any] = [ROOM_PROMPT]
            contents.extend(_image_part(img) for img in images)

            response = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(
                    response_mime_type='application/json',
                    response_schema=ROOM_SCHEMA,
                ),
            )
            estimate = RoomEstimate.model_validate(json.loads(response.text or '{}'))
            logger.info("Room estimate: %s", estimate.model_dump(exclude_none=True))
            return estimate
        except Exception as e:
            logger.error("Room analysis error: %s", e)
            return FALLBACK_ROOM.model_copy()

    def generate_build_guide(self, config: DeskConfiguration) -> Optional[BuildGuide]:
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=build_guide_prompt(config),
                config=types.GenerateContentConfig(
                    response_mime_type='application/json',
                    response_schema=BUILD_GUIDE_SCHEMA,
                ),
            )
            if not response.text:
                return None
            return BuildGuide.model_validate(json.loads(response.text))
        except Exception as e:
            logger.error("Error generating build guide: %s", e)
            return None

    def chat(self, message: str, config: DeskConfiguration,
             history: Optional[List[ChatMessage]] = None,
             image: Optional[str] = None) -> ChatReply:
        """
        One chat turn. A design patch from the model is returned, not applied
        anywhere else: the caller owns the configuration.
        """
        try:
            contents: List[Any] = []
            for m in history or []:
                contents.append(types.Content(role=m.role, parts=[types.Part.from_text(text=m.text)]))

            parts = [types.Part.from_text(text=message)]
            # The first room photo goes along as context
            img = image or (config.images[0] if config.images else None)
            if img:
                parts.insert(0, _image_part(img))
            contents.append(types.Content(role='user', parts=parts))

            response = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(
                    system_instruction=chat_system_instruction(config),
                    tools=[types.Tool(function_declarations=[UPDATE_DESIGN_TOOL])],
                ),
            )

            for call in response.function_calls or []:
                if call.name == 'updateDesign':
                    patch = dict(call.args or {})
                    if patch.get('tvSize') and patch['tvSize'] > 0:
                        patch['hasUppers'] = True
                        patch['upperLayout'] = [t.value for t in TV_UPPER_LAYOUT]
                    updated = apply_patch(config, patch)
                    return ChatReply(text=UPDATED_REPLY, patch=patch, config=updated)

            return ChatReply(text=response.text or EMPTY_REPLY)
        except Exception as e:
            logger.error("Chat error: %s", e)
            return ChatReply(text=ERROR_REPLY)


class ChatSession:
    """
    Chat transcript for one user. send() is the whole turn: append the user
    message, ask the advisor, append the reply.
    """

    def __init__(self, advisor: DesignAdvisor):
        self.advisor = advisor
        self._last_id = 0
        self.messages: List[ChatMessage] = [self._message('model', GREETING)]

    def _message(self, role: str, text: str) -> ChatMessage:
        now = int(time.time() * 1000)
        # Ids are ms timestamps, bumped when two messages land in the same ms
        self._last_id = max(now, self._last_id + 1)
        return ChatMessage(id=str(self._last_id), role=role, text=text, timestamp=now)

    def send(self, text: str, config: DeskConfiguration, image: Optional[str] = None) -> ChatReply:
        history = list(self.messages)
        self.messages.append(self._message('user', text))
        try:
            reply = self.advisor.chat(text, config, history=history, image=image)
        except Exception as e:
            logger.error("Chat transport error: %s", e)
            reply = ChatReply(text=CONNECTION_REPLY)
        self.messages.append(self._message('model', reply.text))
        return reply
