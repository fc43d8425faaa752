"""Generator for TypeScript declaration files of a charting library.

Declarations are built from two documentation dumps: an options tree
(`tree.json`) and a namespace tree (`tree-namespace.json`). Both are turned
into a tree of declaration objects, which is rendered into `.d.ts` modules.
"""

from ._config import Config as Config
from ._declarations import ClassDeclaration as ClassDeclaration
from ._declarations import ConstructorDeclaration as ConstructorDeclaration
from ._declarations import Declaration as Declaration
from ._declarations import EventDeclaration as EventDeclaration
from ._declarations import ExtendedDeclaration as ExtendedDeclaration
from ._declarations import ExternalModuleDeclaration as ExternalModuleDeclaration
from ._declarations import FunctionDeclaration as FunctionDeclaration
from ._declarations import FunctionTypeDeclaration as FunctionTypeDeclaration
from ._declarations import InterfaceDeclaration as InterfaceDeclaration
from ._declarations import ModuleDeclaration as ModuleDeclaration
from ._declarations import NamespaceDeclaration as NamespaceDeclaration
from ._declarations import ParameterDeclaration as ParameterDeclaration
from ._declarations import PropertyDeclaration as PropertyDeclaration
from ._declarations import TypeDeclaration as TypeDeclaration
from ._errors import DeclarationError as DeclarationError
from ._errors import MissingReferenceError as MissingReferenceError
from ._errors import StructuralError as StructuralError
from ._namespace_generator import generate_namespace as generate_namespace
from ._namespace_parser import parse_namespace as parse_namespace
from ._options_generator import generate_options as generate_options
from ._options_parser import parse_options as parse_options
from ._pipeline import GenerationResult as GenerationResult
from ._pipeline import generate_declarations as generate_declarations
from ._relocator import relocate_references as relocate_references
from ._serializer import save_declarations as save_declarations
from ._session import GenerationSession as GenerationSession

__version__ = "0.1.0"
