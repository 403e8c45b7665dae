"""Supported editor languages.

The set is closed: every language carries exactly one starter template
(shown when nothing has been saved yet), a display label and an icon for
the language selector.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Language(str, Enum):
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    CPP = "cpp"
    JAVA = "java"

    @classmethod
    def parse(cls, value: object) -> Optional["Language"]:
        """Return the matching language, or ``None`` for an unknown tag."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return LABELS[self]

    @property
    def icon(self) -> str:
        return ICONS[self]

    @property
    def template(self) -> str:
        return TEMPLATES[self]

    @property
    def storage_key(self) -> str:
        return f"code-{self.value}"


LABELS = {
    Language.JAVASCRIPT: "JavaScript",
    Language.PYTHON: "Python",
    Language.CPP: "C++",
    Language.JAVA: "Java",
}

ICONS = {
    Language.JAVASCRIPT: "\U0001f7e8",
    Language.PYTHON: "\U0001f40d",
    Language.CPP: "⚡",
    Language.JAVA: "☕",
}

TEMPLATES = {
    Language.JAVASCRIPT: """// Welcome to JavaScript!
console.log("Hello, World!");

function fibonacci(n) {
  if (n <= 1) return n;
  return fibonacci(n - 1) + fibonacci(n - 2);
}

console.log("Fibonacci(10):", fibonacci(10));""",
    Language.PYTHON: """# Welcome to Python!
print("Hello, World!")

def fibonacci(n):
    if n <= 1:
        return n
    return fibonacci(n - 1) + fibonacci(n - 2)

print(f"Fibonacci(10): {fibonacci(10)}")""",
    Language.CPP: """// Welcome to C++!
#include <iostream>
using namespace std;

int fibonacci(int n) {
    if (n <= 1) return n;
    return fibonacci(n - 1) + fibonacci(n - 2);
}

int main() {
    cout << "Hello, World!" << endl;
    cout << "Fibonacci(10): " << fibonacci(10) << endl;
    return 0;
}""",
    Language.JAVA: """// Welcome to Java!
public class Main {
    public static int fibonacci(int n) {
        if (n <= 1) return n;
        return fibonacci(n - 1) + fibonacci(n - 2);
    }

    public static void main(String[] args) {
        System.out.println("Hello, World!");
        System.out.println("Fibonacci(10): " + fibonacci(10));
    }
}""",
}


def default_text(language: object) -> str:
    """Starter template for ``language``, or an empty string if it is unknown."""
    parsed = Language.parse(language)
    if parsed is None:
        return ""
    return parsed.template
