from typing import Dict

BASE_INSTRUCTIONS = """
As an experienced script writer and instructional designer, analyze and enhance this script that will be performed by the user's trained AI avatar.
DO NOT add any AI introductions - the avatar is already trained with the user's persona.
""".strip()

BASE_PROMPT = """
Evaluate and improve the script based on these key areas:

1. Engagement & Structure:
   - Hook and attention-grabbing opening
   - Clear learning objectives
   - Logical flow and transitions
   - Effective conclusion and call-to-action
   - Knowledge check points

2. Delivery & Pacing:
   - Natural conversational tone
   - Strategic pauses for emphasis
   - Varied sentence lengths
   - Chunked information
   - Clear transitions between topics

3. Visual Integration:
   - Visual cue markers [VISUAL CUE] for demos/graphics
   - Emphasis points for key concepts
   - Opportunities for on-screen text
   - Visual metaphors and examples
   - Data visualization moments

4. Instructional Design:
   - Progressive complexity
   - Real-world examples
   - Practice opportunities
   - Memory retention techniques
   - Active learning prompts

5. Accessibility & Clarity:
   - Simple language for complex concepts
   - Defined technical terms
   - Consistent terminology
   - Cultural sensitivity
   - Inclusive language

For each improvement made, mark it with [IMPLEMENTED] to track progress.

Script to analyze:
{script}

Respond in JSON format:
{{
  "analysis": {{
    "technicalTerms": ["term1", "term2", ...],
    "readabilityScore": number (between 8.0 and 10.0),
    "suggestions": ["suggestion1 [IMPLEMENTED]", "suggestion2", ...],
    "overallScore": number (between 8.0 and 10.0),
    "prioritizedImprovements": ["improvement1 [IMPLEMENTED]", "improvement2", ...],
    "sections": {{
      "introduction": {{
        "score": number,
        "suggestions": ["suggestion1 [IMPLEMENTED]", "suggestion2"],
        "readabilityMetrics": {{
          "fleschKincaid": number,
          "wordsPerSentence": number,
          "technicalTerms": ["term1", "term2"]
        }},
        "aiEnhancements": "text with [VISUAL CUE] markers"
      }}
    }}
  }},
  "rewrittenScript": {{
    "learningObjectives": ["objective1", "objective2", ...],
    "introduction": "text with [VISUAL CUE] markers (no AI introductions)",
    "mainContent": "text with [VISUAL CUE] markers",
    "conclusion": "text with [VISUAL CUE] markers",
    "callToAction": "text with [VISUAL CUE] markers"
  }}
}}

Ensure each improvement is clearly marked [IMPLEMENTED] when applied in the rewritten script.
The rewritten script should achieve a readability score of at least 8.0 and incorporate all the marked improvements.
""".strip()

STRUCTURED_OUTPUT_DIRECTIVES = """
IMPORTANT FORMATTING INSTRUCTIONS:
1. Respond ONLY with a valid JSON object
2. Do not include any text, markdown, or explanations outside the JSON
3. All string values must use double quotes
4. Escape any quotes within strings with backslash
5. Follow the exact field names and data types specified
6. Include all required fields
7. Ensure numbers are actual numbers, not strings
8. Arrays must contain elements of the specified type
9. Do not include any comments or extra whitespace
10. Properly escape all special characters in strings (\\n, \\", etc.)
11. If response would be too long, reduce content length but maintain complete JSON structure

Required fields checklist:
- analysis: technicalTerms, readabilityScore, suggestions, overallScore, prioritizedImprovements, sections.introduction
- each section: score, suggestions, readabilityMetrics (fleschKincaid, wordsPerSentence, technicalTerms)
- rewrittenScript: learningObjectives, introduction, mainContent, conclusion, callToAction

Example response format:
{
  "analysis": {
    "technicalTerms": ["term1", "term2"],
    "readabilityScore": 9.0,
    "suggestions": ["suggestion1"],
    "overallScore": 8.5,
    "prioritizedImprovements": ["improvement1"],
    "sections": {
      "introduction": {
        "score": 8.5,
        "suggestions": ["suggestion1"],
        "readabilityMetrics": {
          "fleschKincaid": 8.0,
          "wordsPerSentence": 15.5,
          "technicalTerms": ["term1"]
        }
      }
    }
  },
  "rewrittenScript": {
    "learningObjectives": ["objective1"],
    "introduction": "Introduction text",
    "mainContent": "Main content text",
    "conclusion": "Conclusion text",
    "callToAction": "Call to action text"
  }
}
""".strip()

# Per-model additions on top of BASE_INSTRUCTIONS
MODEL_INSTRUCTIONS: Dict[str, str] = {
    "google/gemini-pro": """
CRITICAL INSTRUCTIONS:
1. Return ONLY a JSON object
2. Do not include any markdown formatting (no ```json or ```)
3. Do not include any explanatory text
4. Ensure the JSON is properly formatted with all required fields
5. Do not include any content outside the JSON structure""",
    "google/gemini-2.0-flash-thinking-exp:free": """
Additional Instructions for Gemini Flash Thinking:
- Optimize for quick, efficient analysis
- Focus on high-impact improvements
- Suggest rapid visualization techniques
- Keep suggestions concise and actionable""",
    "deepseek/deepseek-chat": """
Additional Instructions:
1. Focus on technical accuracy and clarity
2. Provide detailed, actionable suggestions
3. Ensure thorough readability analysis
4. Return only the JSON object, no additional text""",
    "meta-llama/llama-3.2-1b-instruct:free": """
Special Instructions for Llama 3.2:
1. Keep analysis concise but thorough
2. Focus on essential improvements
3. Prioritize clarity in suggestions
4. No additional text or formatting""",
    "meta-llama/llama-2-13b-chat": """
Additional Instructions for Llama 2:
- Focus on fundamental improvements
- Keep analysis straightforward
- Emphasize clear structure
- Focus on core learning objectives""",
    "anthropic/claude-3-sonnet-20240229": """
When rewriting the script:
- Use natural, conversational language
- Include clear transitions between topics
- Break down complex concepts with examples
- Add engagement points and questions
- Keep technical accuracy while improving accessibility""",
}


def get_prompt_for_model(model_id: str) -> str:
    extra = MODEL_INSTRUCTIONS.get(model_id, "").strip()
    return f"{BASE_INSTRUCTIONS}\n\n{extra}" if extra else BASE_INSTRUCTIONS


def enhance_prompt_for_structured_output(base_prompt: str) -> str:
    return f"{base_prompt}\n\n{STRUCTURED_OUTPUT_DIRECTIVES}"


def build_analysis_prompt(script: str, model_id: str = "") -> str:
    prompt = get_prompt_for_model(model_id) + "\n\n" + BASE_PROMPT.format(script=script)
    return enhance_prompt_for_structured_output(prompt)
