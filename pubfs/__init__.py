from .core import FileManager, clean_name
from .config import ManagerConfig
from .models import FileNode, FolderNode, ItemMatch, MutationResult
from .errors import (
	FileManagerError, NotFound, InvalidInput, InvalidIdentifier, RootProtected,
	Conflict, AlreadyExists, NotEmpty, IOFailure, DirectoryUnreadable, DeleteFailed
)
from .codec import encode_folder_id, decode_folder_id, encode_file_id, ROOT_ID
