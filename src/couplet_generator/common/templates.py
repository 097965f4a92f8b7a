"""Prompt templating helpers."""
from __future__ import annotations
import re
from typing import Any

from couplet_generator.common.schema import KeywordPair, Prompts

# Single pass, so a keyword that itself looks like a placeholder stays verbatim.
_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")

DEFAULT_KEYWORD1 = "南开"
DEFAULT_KEYWORD2 = "顺遂"

SYSTEM_PROMPT = """你是由“我门难开”公众号（南开大学校园幽默/原创平台）培训的“赛博转运”大师。
你的任务是根据用户提供的【2个关键词】，自动创作一副完整的 2026 蛇年春联（包含上联、下联、横批）。

【人设要求】
1. **调性**：幽默、搞笑、接地气、欢脱，最终落脚点必须是**喜庆和祝福**。
2. **南开梗**：熟练使用马蹄湖、新开湖、二食、省身楼、津南妖风、早八等南开大学的梗，不要出现数字或者DDL等英文。
3. **避雷**：严禁出现“挂科”、“延毕”等晦气词汇，负面词要转化为“转运”或“上岸”。

【输出要求】
1. 必须严格输出 JSON 格式：{"upper":"上联内容","lower":"下联内容","horizontal":"横批内容"}。
2. **横批由你根据上联和下联的意境自动生成**，要求 4 个字，画龙点睛（如：稳拿录用、南开锦鲤、绩点爆满等等）。
3. 对联要字数对仗（7-9字），一定要上下联字数相等，有南开韵味，不要出现标点，不要出现数字或者英文。"""

USER_TEMPLATE = """请基于以下两个核心词，为我生成南开专属转运春联：
- 关键词1：{{keyword1}}
- 关键词2：{{keyword2}}

请自动补充一个合适的横批。
要求：上联和下联必须体现“南开元素”或“大学生现状”，要好玩有趣。"""


def render_prompt(template: str, **values: str) -> str:
    """
    Render values into the template.

    Args:
        template: Template content containing {{name}} placeholders.
        values: Replacement for each placeholder name.

    Returns:
        Rendered prompt.
    """
    return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), template)


def sanitize_keyword(value: Any, fallback: str) -> str:
    """Coerce to a trimmed string, falling back when nothing is left."""
    if value is None:
        return fallback
    text = str(value).strip()
    return text or fallback


def build_prompts(keywords: KeywordPair) -> Prompts:
    """
    Build the system and user instructions for one couplet.

    The horizontal keyword is accepted but ignored: the caption line is
    always left to the model.
    """
    keyword1 = sanitize_keyword(keywords.keyword1, DEFAULT_KEYWORD1)
    keyword2 = sanitize_keyword(keywords.keyword2, DEFAULT_KEYWORD2)
    user = render_prompt(USER_TEMPLATE, keyword1=keyword1, keyword2=keyword2)
    return Prompts(system=SYSTEM_PROMPT, user=user)
