#File: services/prompts.py
"""
Prompt templates sent to the completion service.

The report template is external-facing: downstream markdown consumers key on
its section headings. Bump REPORT_TEMPLATE_VERSION whenever its text changes.
"""
from typing import Dict

REPORT_TEMPLATE_VERSION = "2025-01.1"

PROMPT_TEMPLATES: Dict[str, str] = {
    "paper_summary": """Provide a very brief 2-3 bullet point summary of this research paper (max 50 words total):
Title: {title}
Abstract: {abstract}""",

    "paper_analysis": """Analyze this research paper and provide the following details in a structured format:
- Research question
- Study methodology
- Key findings
- Limitations
- Conclusion

Title: {title}
Abstract: {abstract}""",

    "consolidated_overview": """Synthesize a cohesive overview of these research papers (max 100 words). Focus on common themes, key findings, and broader implications. Don't list papers individually.

Papers:
{papers}""",

    "abstract_summary": """Summarize this research paper abstract in 35 words or less. Output only the summary text, no preamble, labels, or additional commentary.

Abstract: {abstract}""",

    "prompt_suggestion": """As a research assistant, analyze this query and suggest improvements:

Original query: "{initial_query}"

Provide response in this JSON format:
{{
  "refinedQuery": "improved version of the query",
  "suggestedElements": {{
    "specificity": [
      "specific aspect 1",
      "specific aspect 2"
    ],
    "researchType": [
      "methodology 1",
      "methodology 2"
    ],
    "practicalApplication": [
      "application 1",
      "application 2"
    ]
  }},
  "questionVariations": [
    {{
      "question": "more specific version of the query",
      "explanation": "why this version is more effective"
    }},
    {{
      "question": "alternative approach to the query",
      "explanation": "how this approach differs"
    }}
  ],
  "relatedConcepts": [
    "technical term 1",
    "technical term 2"
  ]
}}

Guidelines:
1. Make suggestions more specific and measurable
2. Include relevant technical terms
3. Consider different research approaches
4. Focus on practical applications
5. Break down complex queries into specific elements""",

    "research_tags": """Generate 3-4 relevant research type tags for this query: "{query}"
Return only the tags separated by commas, like: "Specificity, Research type, Practical application\"""",

    "report_dataset_entry": """Title: **{title}**  
   Authors: {authors}  
   Abstract: {abstract}  
   Analysis: {analysis}  
  """,

    "structured_report": """Generate a comprehensive, evidence-based research report on "{query}" in a structured academic format. Base the analysis solely on the provided papers, ensuring all claims are supported by their findings. Follow this format precisely, keeping sections concise (max 150 words each unless specified) and avoiding vague generalizations. Use an academic writing style.

---

## {query}  
*Generated on {generated_on}*

---

### Abstract  
Summarize the research (100-150 words):  
- Objective: What is the main goal of this research?  
- Methodology: Overview of key methods used across papers.  
- Findings: Highlight 2-3 major results.  
- Significance: Why do these findings matter?  

---

### Introduction  
Provide context (100-150 words):  
- Background: Why is "{query}" a significant topic?  
- Problem Statement: What specific issue does this research address?  
- Research Questions: List 2-3 key questions explored in the papers.  
- Scope: Focus on insights from the provided papers only.  

---

### Literature Review  
Analyze existing research (150-200 words):  
- Current State: Summarize trends from the papers.  
- Frameworks: Identify common theories or models (if any).  
- Gaps: Highlight 1-2 gaps the papers address or leave unresolved.  
- Key Terms: Define 2-3 critical concepts from the papers.  

---

### Methodology  
Detail methods (150 words):  
- Approach: Qualitative, quantitative, or mixed?  
- Data Sources: Types of data used in the papers (e.g., experiments, surveys).  
- Analysis Techniques: Specific methods (e.g., statistical tests, simulations).  
- Tools: Mention software or frameworks (if specified).  

---

### Results and Analysis  
Present findings in a table (max 5 rows), followed by a brief analysis (150 words):  

| Category         | Finding             | Evidence (Cite Paper Title) | Impact             |  
|------------------|---------------------|-----------------------------|--------------------|  
| [e.g., Efficiency] | [e.g., 20% improvement] | [e.g., "Paper Title"]   | [e.g., Scalability] |  

- Analysis: Compare findings, note strengths/weaknesses, and link to evidence.  

---

### Discussion  
Evaluate implications (150 words):  
- Interpretation: What do the results mean for "{query}"?  
- Comparison: How do findings align with broader research?  
- Implications: 1-2 practical or theoretical applications.  
- Limitations: 1-2 constraints from the papers.  

---

### Conclusion  
Summarize takeaways (100-150 words):  
- Contributions: 1-2 new insights from the papers.  
- Key Insights: What should readers remember?  
- Future Directions: 1-2 specific research questions for future work.  

---

### References  
List all papers in APA format:  
- [Author(s)]. ([Year]). [Title]. [Link].  

---

**Guidelines:**  
1. Use only the provided papers as the dataset.  
2. Cite paper titles in the text (e.g., "As shown in 'Paper Title'").  
3. Include quantitative data (e.g., percentages, metrics) where available.  
4. Avoid speculation; ground all statements in the papers’ abstracts or analyses.  
5. Ensure table data is concise and relevant to "{query}".  

**Dataset:**  
{dataset}""",
}

REPORT_SECTION_HEADINGS = (
    "Abstract",
    "Introduction",
    "Literature Review",
    "Methodology",
    "Results and Analysis",
    "Discussion",
    "Conclusion",
    "References",
)

# Generation parameters per prompt: (temperature, max_tokens)
GENERATION_PARAMS: Dict[str, tuple] = {
    "paper_summary": (0.2, 100),
    "paper_analysis": (0.3, 500),
    "consolidated_overview": (0.3, 200),
    "abstract_summary": (0.3, 50),
    "prompt_suggestion": (0.3, 800),
    "research_tags": (0.2, 100),
    "structured_report": (0.3, 2000),
}

SUMMARY_ABSTRACT_CHARS = 1000


def render(name: str, **values) -> str:
    return PROMPT_TEMPLATES[name].format(**values)
