"""
디자인 토큰 내보내기

모두 입력만으로 결과가 정해지는 순수 변환이다.
- Tailwind CSS v4 @theme 블록
- CSS custom property (:root)
- 사람과 LLM이 읽는 브랜드 요약
"""

from typing import List, Optional

from pixyo.brand_design.tokens import DesignTokens, format_number


def generate_tailwind_config(tokens: DesignTokens) -> str:
    colors = tokens.colors
    typography = tokens.typography
    shadows = tokens.shadows

    lines: List[str] = [
        "/* Tailwind CSS v4 - @theme directive */",
        "/* Paste this into your main CSS file */",
        "",
        "@theme {",
    ]

    lines.append("  /* Colors */")
    for name, value in colors.palette.items():
        lines.append(f"  --color-brand-{name}: {value};")
    lines.append(f"  --color-bg-default: {colors.semantic.background.default};")
    lines.append(f"  --color-bg-subtle: {colors.semantic.background.subtle};")
    lines.append(f"  --color-bg-inverse: {colors.semantic.background.inverse};")
    lines.append(f"  --color-text-default: {colors.semantic.text.default};")
    lines.append(f"  --color-text-muted: {colors.semantic.text.muted};")
    lines.append("")

    lines.append("  /* Typography */")
    lines.append(f"  --font-heading: '{typography.fonts.heading.family}', {typography.fonts.heading.fallback};")
    lines.append(f"  --font-body: '{typography.fonts.body.family}', {typography.fonts.body.fallback};")
    lines.append("")

    lines.append("  /* Spacing */")
    for key, value in tokens.spacing.scale.model_dump(by_alias=True).items():
        lines.append(f"  --spacing-{key}: {value};")
    lines.append("")

    # default는 다른 값의 별칭이므로 제외
    lines.append("  /* Radius */")
    for key, value in tokens.borders.radius.model_dump(by_alias=True).items():
        if key != "default":
            lines.append(f"  --radius-{key}: {value};")
    lines.append("")

    lines.append("  /* Shadows */")
    lines.append(f"  --shadow-sm: {shadows.sm};")
    lines.append(f"  --shadow-md: {shadows.md};")
    lines.append(f"  --shadow-lg: {shadows.lg};")
    lines.append(f"  --shadow-xl: {shadows.xl};")

    lines.append("}")
    return "\n".join(lines)


def generate_css_variables(tokens: DesignTokens) -> str:
    colors = tokens.colors
    semantic = colors.semantic
    typography = tokens.typography
    scale = typography.scale
    spacing = tokens.spacing
    borders = tokens.borders
    shadows = tokens.shadows

    lines: List[str] = [":root {"]

    lines.append("  /* Colors - Palette */")
    for name, value in colors.palette.items():
        lines.append(f"  --color-{name}: {value};")

    lines.append("")
    lines.append("  /* Colors - Semantic */")
    lines.extend([
        f"  --color-primary: {semantic.primary};",
        f"  --color-secondary: {semantic.secondary};",
        f"  --color-accent: {semantic.accent};",
        f"  --color-bg-default: {semantic.background.default};",
        f"  --color-bg-subtle: {semantic.background.subtle};",
        f"  --color-bg-inverse: {semantic.background.inverse};",
        f"  --color-text-default: {semantic.text.default};",
        f"  --color-text-muted: {semantic.text.muted};",
        f"  --color-text-inverse: {semantic.text.inverse};",
        f"  --color-text-on-primary: {semantic.text.on_primary};",
        f"  --color-success: {semantic.status.success};",
        f"  --color-warning: {semantic.status.warning};",
        f"  --color-error: {semantic.status.error};",
        f"  --color-info: {semantic.status.info};",
        f"  --color-border: {semantic.border.default};",
        f"  --color-border-subtle: {semantic.border.subtle};",
    ])

    lines.append("")
    lines.append("  /* Typography */")
    lines.append(f"  --font-heading: '{typography.fonts.heading.family}', {typography.fonts.heading.fallback};")
    lines.append(f"  --font-body: '{typography.fonts.body.family}', {typography.fonts.body.fallback};")
    if typography.fonts.mono:
        lines.append(f"  --font-mono: '{typography.fonts.mono.family}', {typography.fonts.mono.fallback};")
    lines.append(f"  --font-size-base: {format_number(scale.base)}px;")
    for key in ("xs", "sm", "md", "lg", "xl", "2xl", "3xl", "4xl", "5xl"):
        value = scale.model_dump(by_alias=True)[key]
        lines.append(f"  --font-size-{key}: {value};")
    for key, value in typography.line_height.model_dump().items():
        lines.append(f"  --line-height-{key}: {format_number(value)};")
    for key, value in typography.letter_spacing.model_dump().items():
        lines.append(f"  --letter-spacing-{key}: {value};")
    for key, value in typography.font_weights.model_dump().items():
        lines.append(f"  --font-weight-{key}: {value};")

    lines.append("")
    lines.append("  /* Spacing */")
    lines.append(f"  --space-base: {format_number(spacing.base)}px;")
    for key, value in spacing.scale.model_dump(by_alias=True).items():
        lines.append(f"  --space-{key}: {value};")
    lines.append(f"  --container-max-width: {spacing.container};")
    lines.append(f"  --section-padding: {spacing.section_padding};")

    lines.append("")
    lines.append("  /* Borders */")
    for key, value in borders.radius.model_dump(by_alias=True).items():
        lines.append(f"  --radius-{key}: {value};")
    lines.append(f"  --border-width: {borders.width};")
    lines.append(f"  --border-color: {borders.color};")

    lines.append("")
    lines.append("  /* Shadows */")
    lines.append(f"  --shadow-sm: {shadows.sm};")
    lines.append(f"  --shadow-md: {shadows.md};")
    lines.append(f"  --shadow-lg: {shadows.lg};")
    lines.append(f"  --shadow-xl: {shadows.xl};")

    lines.append("}")
    return "\n".join(lines)


def generate_llm_context(tokens: DesignTokens, brand_name: Optional[str] = None) -> str:
    """AI 도구의 시스템 프롬프트 컨텍스트로 쓰는 브랜드 요약 (독일어)"""
    semantic = tokens.colors.semantic
    typography = tokens.typography
    weights = typography.font_weights
    borders = tokens.borders
    media = tokens.media
    voice = tokens.voice

    lines: List[str] = []

    if brand_name:
        lines.append(f"# {brand_name} - Brand Design System")
    else:
        lines.append("# Brand Design System")
    lines.append("")

    lines.append("## Farben")
    lines.append(f"- Primär: {semantic.primary}")
    lines.append(f"- Sekundär: {semantic.secondary}")
    lines.append(f"- Akzent: {semantic.accent}")
    lines.append(f"- Hintergrund: {semantic.background.default} (subtle: {semantic.background.subtle})")
    lines.append(f"- Text: {semantic.text.default} (muted: {semantic.text.muted})")
    lines.append(f"- Text auf Primary: {semantic.text.on_primary}")
    lines.append("")

    lines.append("## Typografie")
    lines.append(f"- Heading-Font: {typography.fonts.heading.family}")
    lines.append(f"- Body-Font: {typography.fonts.body.family}")
    lines.append(f"- Basis-Schriftgröße: {format_number(typography.scale.base)}px")
    lines.append(f"- Scale-Ratio: {format_number(typography.scale.ratio)} (Major Third)")
    lines.append(f"- Heading Uppercase: {'Ja' if typography.heading_uppercase else 'Nein'}")
    lines.append(
        f"- Gewichte: Normal {weights.normal}, Medium {weights.medium}, "
        f"Semibold {weights.semibold}, Bold {weights.bold}"
    )
    lines.append("")

    lines.append("## Spacing")
    lines.append(f"- Basis-Einheit: {format_number(tokens.spacing.base)}px")
    lines.append(f"- Container Max-Width: {tokens.spacing.container}")
    lines.append("")

    lines.append("## Formen & Schatten")
    lines.append(f"- Standard-Radius: {borders.radius.default}")
    lines.append(f"- Border: {borders.width} {borders.color}")
    lines.append("- Schatten: sm/md/lg/xl verfügbar")
    lines.append("")

    button = tokens.components.button.primary
    uppercase = ", UPPERCASE" if button.text_transform == "uppercase" else ""
    lines.append("## Button-Stile")
    lines.append(f"- Primary: {button.background}, Text {button.color}, Radius {button.border_radius}{uppercase}")
    lines.append("")

    if media.image_style:
        lines.append("## Bildsprache")
        lines.append(f"- Stil: {media.image_style}")
        lines.append(f"- Icons: {media.icon_style}")
        lines.append("")

    if voice.description or voice.tone:
        lines.append("## Brand Voice")
        lines.append(f"- Formalität: {voice.formality}")
        lines.append(f"- Anrede: {voice.address}")
        if voice.tone:
            lines.append(f"- Tonalität: {', '.join(voice.tone)}")
        if voice.languages:
            lines.append(f"- Sprachen: {', '.join(voice.languages)}")
        if voice.description:
            lines.append(f"- Beschreibung: {voice.description}")
        if voice.dos:
            lines.append(f"- Dos: {'; '.join(voice.dos)}")
        if voice.donts:
            lines.append(f"- Don'ts: {'; '.join(voice.donts)}")

    return "\n".join(lines)


EXPORT_FORMATS = {
    "tailwind": generate_tailwind_config,
    "css": generate_css_variables,
    "llm": generate_llm_context,
}
