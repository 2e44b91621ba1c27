"""Prompt fragments shared by the review and writing agents."""

TEMPLATE_KNOWLEDGE = """
REAL FOUNDATION ARTICLES:
1. SLR Foundation: Shaffril et al. (2021) earthquake preparedness SLR, Shaffril et al. (2024) Climate Services SLR.
2. Scoping Foundation: Arksey & O'Malley (2005), Peters et al. (2021) Scoping reviews methodology.
3. Narrative Foundation: Gregory & Denniss (2018) Introduction to Narrative Reviews.
4. Protocols: PRISMA 2020 (Moher et al.), PRISMA-ScR (Tricco et al.), ROSES (Haddaway et al.).
5. Persoalan Kajian: PICO (Schiavenato), PICo (Lockwood), SPIDER (Cooke et al.).
6. Analysis: Braun & Clarke (2006) Thematic Analysis.
"""

CLEAN_TEXT_INSTRUCTION = """
CRITICAL FORMATTING RULES:
1. STRICTLY NO Markdown symbols like #, ##, or ###. Use simple line breaks.
2. STRICTLY NO double asterisks like **text**.
3. DO NOT use ALL CAPS for titles. Use Standard Sentence case.
4. Use point form (-) for all lists.
5. Provide a synthesis report organized by themes.
6. Provide a section "List of References (APA 7th)" at the bottom with DOI links.
7. Use the knowledge of the "Real Foundation Articles" listed above where appropriate.
"""

REVIEW_GUIDELINES = """
- If SLR: Follow PRISMA/ROSES guidelines. Focus on identification, screening, eligibility, and inclusion.
- If Scoping: Follow PRISMA-ScR. Focus on mapping the breadth of the topic.
- If Narrative: Focus on critical reasoning and thematic discussion.
"""

REPORT_LABEL_INSTRUCTION = """STRICTLY structure the output with the following labels for easy parsing:
[TAJUK]
[ABSTRAK]
[PENGENALAN]
[METODOLOGI]
[HASIL KAJIAN]
[PERBINCANGAN]
[RUMUSAN]
[RUJUKAN]

Under each label, write the full content. Focus on critical reasoning and proper citation. DO NOT use markdown."""
