from .prompt_compiler import PromptCompiler
from .prompts import PromptStore, PromptTemplate, TemplateCompiler

# PromptCompiler is the main entry point
# PromptStore and TemplateCompiler can be composed directly when needed
__all__ = ['PromptCompiler', 'PromptStore', 'PromptTemplate', 'TemplateCompiler']
