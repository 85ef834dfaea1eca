from __future__ import annotations

COMMIT_TEMPLATE = (
    "Generate a single line, concise, and descriptive git commit message summarizing "
    "the staged changes on the following files: {files}. "
    "Do not include bullet points, extra formatting, or multiple lines. Diff:\n{diff}"
)

STATUS_TEMPLATE = (
    "Based on the following git diff output for staged changes, provide a single concise "
    "sentence that summarizes the changes made to each file. "
    "Indicate for each file whether code was added, removed, or modified, and if possible, "
    "what kind of changes occurred (for example, bug fixes, refactoring, or feature additions). "
    "Do not simply list the file names. Diff:\n\n{diff}"
)


def commit_prompt(files: str, diff: str) -> str:
    return COMMIT_TEMPLATE.format(files=files.strip(), diff=diff)


def status_prompt(diff: str) -> str:
    return STATUS_TEMPLATE.format(diff=diff)
