from typing import Dict, Any, List, Optional

from config import config as app_config
from core.prompts import PromptStore, PromptTemplate, TemplateCompiler
from utils import get_logger

logger = get_logger(__name__)


class PromptCompiler:
    """Single entry point over a PromptStore and its TemplateCompiler."""
    
    def __init__(self, **kwargs):
        self.config = dict(kwargs)
        self.config['prompts_dir'] = kwargs.get('prompts_dir') or app_config.paths.prompts_dir
        self.config['template_extension'] = kwargs.get('template_extension') or app_config.compiler.template_extension
        self.config['default_locale'] = kwargs.get('default_locale') or app_config.compiler.default_locale
        self.config['format_output'] = kwargs.get('format_output', app_config.compiler.format_output)
        
        self.store = PromptStore(
            self.config['prompts_dir'],
            template_extension=self.config['template_extension']
        )
        self.compiler = TemplateCompiler(self.store, format_output=self.config['format_output'])
        logger.debug(f"Prompt compiler ready with {len(self.store)} templates from {self.config['prompts_dir']}")
    
    def compile(self, name: str, variables: Optional[Dict[str, Any]] = None,
                options: Optional[Dict[str, Any]] = None) -> str:
        return self.compiler.compile(name, variables, options)
    
    def add_template(self, name: str, template: str, metadata: Optional[Dict[str, Any]] = None) -> PromptTemplate:
        return self.store.add_template(name, template, metadata)
    
    def get_template(self, name: str) -> Optional[PromptTemplate]:
        return self.store.get_template(name)
    
    def list_templates(self, category: Optional[str] = None) -> List[PromptTemplate]:
        return self.store.list_templates(category)
    
    def remove_template(self, name: str) -> None:
        self.store.remove_template(name)
    
    def save(self) -> None:
        """Save all templates to the prompts directory"""
        self.store.save()
    
    def export(self, format: str = 'json') -> str:
        """Export all templates as a JSON or YAML document"""
        return self.store.export(format)
    
    def import_templates(self, data: str, format: str = 'json') -> int:
        """Merge templates from a JSON or YAML document produced by export()"""
        return self.store.import_templates(data, format)
