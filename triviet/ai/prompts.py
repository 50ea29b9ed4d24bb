"""Centralized prompt management for Trí Việt.

All AI prompts are defined here for consistency and maintainability.
"""

LANGUAGE_RULE = """**CRITICAL LANGUAGE RULE (MUST FOLLOW):**
The user has explicitly selected **{language}** as their interface language.
- You MUST generate ALL output in **{language}**.
- EVEN IF the input is in another language, you MUST TRANSLATE the extracted information into **{language}**.
- Do NOT output English unless **{language}** is explicitly English."""

LATEX_RULE = """**LaTeX for Math**: If the content contains mathematical formulas, variables or symbols, you MUST write them in LaTeX. Use `$...$` for inline math and `$$...$$` for block-level equations, e.g. `$$x = \\frac{{-b \\pm \\sqrt{{b^2-4ac}}}}{{2a}}$$`."""

# Summary / mind map prompts
MINDMAP_SUMMARY_PROMPT = """You are a highly precise AI content analyzer. Process the provided content and generate a mind map and flashcards.

{language_rule}

{latex_rule}

**Input Context:** The source is named "{source_name}".
Use the source name only as a weak context clue. Derive the topic and summary primarily from the actual content. If the name is generic (e.g. "untitled", "doc", "download") or contradicts the content, ignore it.

**Process:**
1. Identify the core topic; it becomes the root node title.
2. Extract the key concepts as child nodes and their detailed points as sub-nodes.
3. Write 5-10 question/answer flashcards that cover the key concepts.

Return ONLY a valid JSON object with the keys "mindMap" (a node with "title" and optional "children") and "flashcards" (a list of objects with "question" and "answer").

**Content:**
{content}"""

# Learning path prompts
LEARNING_PLAN_PROMPT = """Create a structured learning plan for a grade {grade} student in {subject}. The student's learning goal is "{goal}".
The plan must consist of 5 to 7 logically ordered, distinct lesson topics.

{language_rule}

{latex_rule}

Your entire response MUST be a single JSON object with a key "plan" which is an array of strings. Each string is a lesson topic.
Do not include any other text or formatting."""


def build_mindmap_summary_prompt(content: str, language: str, source_name: str | None) -> str:
    return MINDMAP_SUMMARY_PROMPT.format(
        language_rule=LANGUAGE_RULE.format(language=language),
        latex_rule=LATEX_RULE.format(),
        source_name=source_name or "untitled",
        content=content,
    )


def build_learning_plan_prompt(grade: int, subject: str, goal: str, language: str) -> str:
    return LEARNING_PLAN_PROMPT.format(
        grade=grade,
        subject=subject,
        goal=goal,
        language_rule=LANGUAGE_RULE.format(language=language),
        latex_rule=LATEX_RULE.format(),
    )


DOCUMENT_FORMAT_RULE = """**CRITICAL OUTPUT FORMAT:**
Your entire response MUST be a single, valid JSON object in {language} with two keys:
1. "markdownContent": the content formatted with Markdown and LaTeX for web display.
2. "wordContent": the same content with every LaTeX formula converted to Microsoft Word's native equation format (UnicodeMath) for direct copy-pasting.
Do not include any text outside of this JSON object."""

LESSON_PROMPT = """You are an AI Tutor. Create a comprehensive lesson for a grade {grade} student in {subject} about the topic: "{topic}".
The student's learning goal is "{goal}".

{language_rule}

{latex_rule}

{format_rule}

**Lesson Structure for "markdownContent":**
- **Explanation:** A clear explanation of the main concepts.
- **Multiple Choice Questions:** 3-5 questions with 4 options (A, B, C, D).
- **Essay Question:** 1 critical thinking question.
- **Formatting:** Use Markdown headers (##) for structure."""

REVIEW_FOCUS = {
    "numbers": "The lesson MUST focus exclusively on Numbers and Algebra. DO NOT include any Geometry topics.",
    "geometry": "The lesson MUST focus exclusively on Geometry. DO NOT include any Numbers and Algebra topics.",
    "both": "The lesson should provide a balanced review of both Numbers and Algebra and Geometry.",
}

REVIEW_LESSON_PROMPT = """You are an AI Tutor specializing in {subject}. Create a comprehensive review lesson for a grade {grade} student.
The student's learning goal is "{goal}".

**Topic Focus:** {focus}

{language_rule}

{latex_rule}

{format_rule}

**Lesson Structure for "markdownContent":**
1. **Explanation of Key Concepts:** A clear summary of the core theories and formulas.
2. **Worked Examples:** 2-3 step-by-step examples.
3. **Practice Exercises:** 5-7 practice exercises of varying difficulty, including their solutions.
4. **Formatting:** Use Markdown headers (##, ###) for structure."""

# Exam and exercise prompts
EXAM_PROMPT = """Act as an expert {subject} {author}. Your task is to create {document} for a grade {grade} student.

**Details:**
- Topic: "{topic}"
{details}

{sections}

{language_rule}

{latex_rule}

{format_rule}

**Other Instructions:**
- **Content:** Questions must be relevant and grade-appropriate.
- **Difficulty Distribution:** Strictly follow the specified question counts for all sections.
- **Structure:** Create the following distinct section(s): {section_titles}.
- **Multiple Choice:** Provide 4 options (A, B, C, D) for each multiple choice question and clearly indicate the correct answer."""

SECTION_DETAILS = """**{title} Section Details:**
- Total Questions: {total}
- Breakdown by Difficulty:
    - Recognition: {recognition} questions
    - Comprehension: {comprehension} questions
    - Application: {application} questions"""

SIMILAR_EXERCISES_PROMPT = """Act as an expert teacher who speaks **{language}**. Below is a question a student is working on. Your task is to generate a response in two distinct parts.

**Input Context:** The question comes from "{source_name}".
Use the source name only as a weak context clue. If it contradicts the question itself, ignore it.

{language_rule}

{latex_rule}

{format_rule}

**Response Structure:**
**PART 1:** Start with the heading "## {analysis_heading}". Explain the core concept being tested, identify the key steps to solve it and state the difficulty level.
**PART 2:** Start with the heading "## {exercises_heading}". Generate 3 to 5 new questions that test the exact same concepts with different numbers and scenarios.

**Question:**
{question}"""


def _document_rules(language: str) -> dict[str, str]:
    return {
        "language_rule": LANGUAGE_RULE.format(language=language),
        "latex_rule": LATEX_RULE.format(),
        "format_rule": DOCUMENT_FORMAT_RULE.format(language=language),
    }


def build_lesson_prompt(grade: int, subject: str, goal: str, topic: str, language: str) -> str:
    return LESSON_PROMPT.format(grade=grade, subject=subject, goal=goal, topic=topic, **_document_rules(language))


def build_review_lesson_prompt(grade: int, subject: str, goal: str, scope: str, language: str) -> str:
    return REVIEW_LESSON_PROMPT.format(
        grade=grade,
        subject=subject,
        goal=goal,
        focus=REVIEW_FOCUS[scope],
        **_document_rules(language),
    )


def build_exam_prompt(
    *,
    grade: int,
    subject: str,
    topic: str,
    language: str,
    multiple_choice: dict[str, int],
    essay: dict[str, int],
    for_teacher: bool,
    duration: int | None = None,
    textbook: str | None = None,
) -> str:
    """Exam prompt for teachers, practice set prompt for students.

    ``multiple_choice`` and ``essay`` map difficulty level to question count.
    """
    sections = []
    titles = []
    for title, counts in (("Multiple Choice", multiple_choice), ("Essay", essay)):
        total = sum(counts.values())
        if total:
            sections.append(SECTION_DETAILS.format(title=title, total=total, **counts))
            titles.append(f'"{("I", "II")[len(titles)]}. {title.upper()}"')

    details = []
    if for_teacher and duration:
        details.append(f"- Duration: {duration} minutes")
    if textbook:
        details.append(f'- Textbook: "{textbook}". Strictly follow the curriculum from this textbook.')

    return EXAM_PROMPT.format(
        subject=subject,
        author="teacher" if for_teacher else "tutor",
        document="a well-structured exam" if for_teacher else "a set of practice exercises",
        grade=grade,
        topic=topic,
        details="\n".join(details),
        sections="\n\n".join(sections),
        section_titles=" and ".join(titles),
        **_document_rules(language),
    )


def build_similar_exercises_prompt(question: str, language: str, source_name: str | None) -> str:
    return SIMILAR_EXERCISES_PROMPT.format(
        question=question,
        source_name=source_name or "untitled",
        analysis_heading="Analysis of the original question",
        exercises_heading="Similar practice exercises",
        language=language,
        **_document_rules(language),
    )
