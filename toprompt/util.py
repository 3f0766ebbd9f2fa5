from pathlib import Path
from typing import Dict, Optional

# language hints for the opening fence of markdown code blocks.
EXTENSION_TAGS: Dict[str, str] = {
    "rs": "rust", "py": "python", "js": "javascript", "ts": "typescript",
    "jsx": "jsx", "tsx": "tsx", "java": "java", "c": "c", "h": "c",
    "cpp": "cpp", "cc": "cpp", "cxx": "cpp", "hpp": "cpp", "hh": "cpp",
    "cs": "csharp", "go": "go", "rb": "ruby", "php": "php", "swift": "swift",
    "kt": "kotlin", "kts": "kotlin", "r": "r", "m": "matlab", "mm": "objectivec",
    "sql": "sql", "sh": "bash", "bash": "bash", "zsh": "bash",
    "yaml": "yaml", "yml": "yaml", "json": "json", "xml": "xml",
    "html": "html", "htm": "html", "css": "css", "scss": "scss", "sass": "scss",
    "less": "less", "md": "markdown", "markdown": "markdown", "tex": "latex",
    "vim": "vim", "vimrc": "vim", "lua": "lua", "dart": "dart", "scala": "scala",
    "jl": "julia", "hs": "haskell",
    "clj": "clojure", "cljs": "clojure", "cljc": "clojure", "edn": "clojure",
    "ex": "elixir", "exs": "elixir", "erl": "erlang", "hrl": "erlang",
    "ml": "ocaml", "mli": "ocaml",
    "fs": "fsharp", "fsi": "fsharp", "fsx": "fsharp", "fsscript": "fsharp",
    "pl": "perl", "pm": "perl",
    "ps1": "powershell", "psm1": "powershell", "psd1": "powershell",
    "toml": "toml", "ini": "ini", "cfg": "ini", "conf": "ini",
    "dockerfile": "dockerfile", "makefile": "makefile", "mk": "makefile",
    "mak": "makefile", "gradle": "groovy", "tf": "terraform",
    "tfvars": "terraform", "hcl": "hcl", "http": "http", "gd": "gdscript",
}

# extensionless files recognised by name.
FILENAME_TAGS: Dict[str, str] = {
    "dockerfile": "dockerfile",
    "makefile": "makefile",
    "gnumakefile": "makefile",
}

def tag_for(extension: Optional[str]) -> str:
    # maps a file extension ("py" or ".py") to a fence language tag, "" if unknown.
    if not extension:
        return ""
    return EXTENSION_TAGS.get(extension.lower().lstrip("."), "")

def tag_for_path(path: Path) -> str:
    # like tag_for, but also recognises files such as Dockerfile by name.
    if path.suffix:
        return tag_for(path.suffix)
    return FILENAME_TAGS.get(path.name.lower(), "")
