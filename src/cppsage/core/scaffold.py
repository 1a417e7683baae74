"""Directory templates for `sage new`."""

from pathlib import Path

from cppsage.core.build_description import LinkageSettings, fresh_document
from cppsage.core.config import (
    DEFAULT_BEGIN_MARKER,
    DEFAULT_END_MARKER,
    DEFAULT_LINK_TEMPLATE,
    SageConfig,
    save_config,
)
from cppsage.core.errors import ProjectExistsError

CLANG_FORMAT_CONTENT = """\
Language: Cpp
BasedOnStyle: LLVM
AccessModifierOffset: -2
AlignAfterOpenBracket: Align
AlignConsecutiveAssignments: false
AlignConsecutiveDeclarations: false
AlignEscapedNewlines: Left
AlignOperands: Align
AlignTrailingComments: true
AllowShortBlocksOnASingleLine: false
AllowShortCaseLabelsOnASingleLine: false
AllowShortFunctionsOnASingleLine: All
AllowShortIfStatementsOnASingleLine: Never
AllowShortLoopsOnASingleLine: false
AlwaysBreakTemplateDeclarations: Yes
BinPackArguments: true
BinPackParameters: true
BreakBeforeBraces: Attach
BreakBeforeTernaryOperators: true
BreakConstructorInitializers: BeforeColon
ColumnLimit: 80
ConstructorInitializerIndentWidth: 4
ContinuationIndentWidth: 4
Cpp11BracedListStyle: true
DerivePointerAlignment: false
FixNamespaceComments: true
IncludeBlocks: Preserve
IndentCaseLabels: false
IndentWidth: 4
KeepEmptyLinesAtTheStartOfBlocks: true
MaxEmptyLinesToKeep: 1
NamespaceIndentation: None
PointerAlignment: Left
ReflowComments: true
SortIncludes: true
SortUsingDeclarations: true
SpaceAfterCStyleCast: false
SpaceAfterTemplateKeyword: true
SpaceBeforeAssignmentOperators: true
SpaceBeforeParens: ControlStatements
SpacesBeforeTrailingComments: 2
Standard: c++17
TabWidth: 4
UseTab: Never
"""

CLANGD_CONTENT = """\
CompileFlags:
  Add: [-std=c++17]
"""

EDITORCONFIG_CONTENT = """\
root = true

[*]
indent_style = space
indent_size = 4
end_of_line = lf
charset = utf-8
trim_trailing_whitespace = true
insert_final_newline = true
"""

GITIGNORE_CONTENT = """\
# CMake
build/
install/
*.VC.db
*.VC.VC.opendb

# Visual Studio
.vs/
*.suo
*.user
*.sln.docstates

# Packages
packages/install/

# Misc
*.log
"""

CONFIG_CMAKE_CONTENT = """\
# This file is managed by sage.
# Manual edits might be overwritten.

if(EXISTS "${CMAKE_CURRENT_SOURCE_DIR}/packages/install/conan_toolchain.cmake")
    include("${CMAKE_CURRENT_SOURCE_DIR}/packages/install/conan_toolchain.cmake")
else()
    message(WARNING "Conan toolchain not found. Run 'sage install' to generate it.")
endif()

# Linkage for one dependency declared in packages/requirements.txt
macro(sage_link_dependency target package)
    find_package(${package} REQUIRED)
    target_link_libraries(${target} PRIVATE ${package}::${package})
endmacro()
"""

MAIN_CPP_CONTENT = """\
#include <iostream>

int main() {
    std::cout << "Hello, world!" << std::endl;
    return 0;
}
"""

REQUIREMENTS_TXT_CONTENT = """\
# Add your dependencies here, one per line
# e.g. fmt/10.2.1
"""

PROJECT_DIRECTORIES = ("build", "cmake", "install", "packages", "res")


def top_level_cmake_lists(project_name: str) -> str:
    return f"""\
cmake_minimum_required(VERSION 3.15)

# Conan package management
include(cmake/config.cmake)

project({project_name} VERSION 0.1.0 LANGUAGES CXX)

set(CMAKE_CXX_STANDARD 17)
set(CMAKE_CXX_STANDARD_REQUIRED ON)

add_subdirectory({project_name})
"""


def create_project(parent: Path, project_name: str) -> Path:
    """Create a new project directory under parent.

    Returns:
        Path to the created project root

    Raises:
        ProjectExistsError: If the target directory already exists
        ValueError: If project_name is not a plain directory name
    """
    if not project_name or Path(project_name).name != project_name or project_name in {".", ".."}:
        raise ValueError(f"Invalid project name: {project_name!r}")

    root = parent / project_name
    if root.exists():
        raise ProjectExistsError(root)

    for directory in PROJECT_DIRECTORIES:
        (root / directory).mkdir(parents=True)
    (root / project_name / "include").mkdir(parents=True)
    (root / project_name / "src").mkdir(parents=True)

    settings = LinkageSettings(
        target=project_name,
        begin_marker=DEFAULT_BEGIN_MARKER,
        end_marker=DEFAULT_END_MARKER,
        line_template=DEFAULT_LINK_TEMPLATE,
    )

    files = {
        ".clang-format": CLANG_FORMAT_CONTENT,
        ".clang-tidy": "",
        ".clangd": CLANGD_CONTENT,
        ".editorconfig": EDITORCONFIG_CONTENT,
        ".gitignore": GITIGNORE_CONTENT,
        "CMakeLists.txt": top_level_cmake_lists(project_name),
        "cmake/config.cmake": CONFIG_CMAKE_CONTENT,
        f"{project_name}/CMakeLists.txt": fresh_document(settings).text,
        f"{project_name}/src/main.cpp": MAIN_CPP_CONTENT,
        "packages/requirements.txt": REQUIREMENTS_TXT_CONTENT,
    }
    for relative, content in files.items():
        (root / relative).write_text(content, encoding="utf-8")

    save_config(root, SageConfig(project_name=project_name))
    return root
